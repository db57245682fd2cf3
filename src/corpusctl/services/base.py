"""BaseService — shared foundation for corpusctl services.

Every service receives a :class:`Corpus` at construction time and reads
the content tree through it. Services never write to disk.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from corpusctl.infrastructure.corpus import Corpus


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class GraphService(BaseService):
            def nodes(self) -> ServiceResult:
                snapshot = self._corpus.load()
                ...
    """

    def __init__(self, corpus: Corpus) -> None:
        self._corpus = corpus
