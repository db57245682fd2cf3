"""CorpusSettings — CLI flags, environment and ``corpusctl.toml`` merged.

Highest precedence first:

1. keyword arguments (the global CLI flags)
2. ``CORPUSCTL_*`` environment variables, ``__`` separating sections
   (``CORPUSCTL_BUILD__STRICT=true``)
3. the discovered or explicit ``corpusctl.toml``
4. defaults from :mod:`corpusctl.config.models`
"""

from __future__ import annotations

import os
import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from corpusctl.config.discovery import find_config
from corpusctl.config.models import BuildConfig, ContentConfig, PathsConfig

# Config file used by the CorpusSettings instance under construction.
_active_toml: ContextVar[Path | None] = ContextVar("_active_toml", default=None)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by a ``corpusctl.toml`` file (may be absent)."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self.toml_path = toml_path
        self._data = _read_toml(toml_path) if toml_path and toml_path.is_file() else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class CorpusSettings(BaseSettings):
    """Resolved settings for one corpusctl invocation (immutable).

    Attributes:
        corpus_root: Base for relative ``dir`` settings: the directory
            holding ``corpusctl.toml``, else the working directory.
        config_path: The TOML file that was read, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CORPUSCTL_",
        "env_nested_delimiter": "__",
    }

    corpus_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    content: ContentConfig = Field(default_factory=ContentConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Init kwargs, then env vars, then TOML. No dotenv or secrets dir."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _active_toml.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        corpus_root: Path | None = None,
        **cli_flags: Any,
    ) -> CorpusSettings:
        """Build settings for a CLI run.

        Args:
            config_path: Explicit ``--config`` file; must exist.
            corpus_root: Skip root resolution (tests, embedding). Config
                discovery then starts from this directory.
            **cli_flags: Global flags, applied over every other source.

        Raises:
            click.ClickException: Explicit config missing, or invalid TOML.
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
        else:
            toml_path = find_config(corpus_root)

        if corpus_root is None:
            corpus_root = toml_path.parent if toml_path else Path.cwd()

        token = _active_toml.set(toml_path)
        try:
            return cls(corpus_root=corpus_root, config_path=toml_path, **cli_flags)
        finally:
            _active_toml.reset(token)

    @property
    def content_dir(self) -> Path:
        return self.corpus_root / self.content.dir

    @property
    def paths_dir(self) -> Path:
        return self.corpus_root / self.paths.dir

    @property
    def metadata_dir(self) -> Path:
        return self.corpus_root / self.paths.metadata_dir

    @property
    def worker_count(self) -> int:
        """Validation pool size; ``[build] workers = 0`` means one per core."""
        return self.build.workers or os.cpu_count() or 1
