"""Node identifiers for the content graph.

A node is a ``(topic, depth)`` pair rendered as ``topic/depth``, or the
bare ``topic`` for documents without a depth (case studies and the like).
References in ``prerequisites`` and ``related_topics`` use the same forms,
plus the ``phase/topic/depth`` content-path form.

Examples:
    >>> node_id("auth", Depth.SURFACE)
    'auth/surface'
    >>> node_id("auth", None)
    'auth'
    >>> split_node_id("auth/mid-depth")
    ('auth', <Depth.MID_DEPTH: 'mid-depth'>)
"""

from __future__ import annotations

from corpusctl.domain.types import Depth

_SEPARATOR = "/"
_DEPTH_VALUES = frozenset(d.value for d in Depth)


def node_id(topic: str, depth: Depth | None) -> str:
    """Canonical node id for a topic at an optional depth."""
    if depth is None:
        return topic
    return f"{topic}{_SEPARATOR}{depth.value}"


def split_node_id(value: str) -> tuple[str, Depth | None]:
    """Split a node id into ``(topic, depth)``.

    Anything whose last segment is not a depth literal is a bare topic.
    """
    head, sep, tail = value.rpartition(_SEPARATOR)
    if sep and head and tail in _DEPTH_VALUES:
        return head, Depth(tail)
    return value, None


def reference_candidates(reference: str) -> list[str]:
    """Node ids a reference may name exactly, most specific first.

    ``phase/topic/depth`` also yields ``topic/depth`` so learning-path style
    references resolve against the graph.
    """
    ref = reference.strip()
    candidates = [ref]
    parts = ref.split(_SEPARATOR)
    if len(parts) == 3 and parts[2] in _DEPTH_VALUES:
        candidates.append(_SEPARATOR.join(parts[1:]))
    return candidates
