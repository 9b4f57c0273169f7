"""
Configuration for the delimio.io module.

Defines IoSettings, a frozen dataclass carrying runtime configuration for stream opening
and text transfer. Defaults are sourced from delimio.core.constants (the single source of
truth).

Source of truth
- delimio.core.constants.BUFFER_SIZE, GZIP_LEVEL, ZSTD_LEVEL, ENCODING

Import DAG discipline
- Depends only on stdlib, delimio.core.constants, and delimio.io.errors.

Notes
- Loading precedence: environment > TOML > defaults.
- Loose mappings (env/TOML) ignore values they cannot coerce; validate() is the strict gate
  and is applied by the stream factory before opening anything.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from delimio.core.constants import BUFFER_SIZE as CORE_BUFFER_SIZE
from delimio.core.constants import ENCODING as CORE_ENCODING
from delimio.core.constants import GZIP_LEVEL as CORE_GZIP_LEVEL
from delimio.core.constants import ZSTD_LEVEL as CORE_ZSTD_LEVEL

from .errors import IoConfigError

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


def _bool(v: Any) -> bool | None:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        lo = v.strip().lower()
        if lo in _TRUE:
            return True
        if lo in _FALSE:
            return False
    return None


def _int(v: Any) -> int | None:
    if isinstance(v, bool):
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class IoSettings:
    """
    Runtime settings for the delimio.io layer.

    Attributes:
        buffer_size (int): Buffer size for raw file handles and decompressed readers.
        gzip_level (int): gzip compression level used on write (0-9).
        zstd_level (int): zstd compression level used on write (1-22).
        encoding (str): Text encoding for lines, strings, and delimited records.
        sniff_content (bool): When True, read-opens of paths that classify as uncompressed
            inspect the leading bytes and decode gzip/zstd content anyway.

    Examples:
        >>> from delimio.io import IoSettings
        >>> IoSettings(gzip_level=9)  # doctest: +ELLIPSIS
        IoSettings(...)
    """

    buffer_size: int = CORE_BUFFER_SIZE
    gzip_level: int = CORE_GZIP_LEVEL
    zstd_level: int = CORE_ZSTD_LEVEL
    encoding: str = CORE_ENCODING
    sniff_content: bool = False

    def validate(self) -> IoSettings:
        """
        Check value ranges and return self.

        Raises:
            IoConfigError: If any value is out of range or the encoding is unknown.
        """
        if self.buffer_size < 1:
            raise IoConfigError(f"buffer_size must be >= 1; got {self.buffer_size}")
        if not 0 <= self.gzip_level <= 9:
            raise IoConfigError(f"gzip_level must be in 0..9; got {self.gzip_level}")
        if not 1 <= self.zstd_level <= 22:
            raise IoConfigError(f"zstd_level must be in 1..22; got {self.zstd_level}")
        try:
            "".encode(self.encoding)
        except LookupError as exc:
            raise IoConfigError(f"unknown encoding {self.encoding!r}") from exc
        return self

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: IoSettings, cfg: dict[str, Any] | None) -> IoSettings:
        """Apply a loose config mapping onto IoSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base
        for key in ("buffer_size", "gzip_level", "zstd_level"):
            if key in cfg:
                value = _int(cfg[key])
                if value is not None:
                    s = replace(s, **{key: value})

        if "encoding" in cfg and isinstance(cfg["encoding"], str) and cfg["encoding"].strip():
            s = replace(s, encoding=cfg["encoding"].strip())

        if "sniff_content" in cfg:
            flag = _bool(cfg["sniff_content"])
            if flag is not None:
                s = replace(s, sniff_content=flag)

        return s

    @classmethod
    def from_env(cls, base: IoSettings | None = None, prefix: str = "DELIMIO_IO_") -> IoSettings:
        """
        Build IoSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - DELIMIO_IO_BUFFER_SIZE
            - DELIMIO_IO_GZIP_LEVEL
            - DELIMIO_IO_ZSTD_LEVEL
            - DELIMIO_IO_ENCODING
            - DELIMIO_IO_SNIFF_CONTENT (1/0/true/false/yes/no/on/off)
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for key in ("buffer_size", "gzip_level", "zstd_level", "encoding", "sniff_content"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> IoSettings:
        """
        Build IoSettings from a TOML file.

        Search order when `path` is None:
            1) ./delimio.toml (with either top-level [io] or direct keys)
            2) ./pyproject.toml under [tool.delimio.io]

        Returns defaults if no file is present.

        Raises:
            IoConfigError: If an explicitly given file cannot be read or parsed.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            explicit = Path(path)
            try:
                with explicit.open("rb") as fh:
                    data = tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                raise IoConfigError(f"cannot load settings from {explicit}: {exc}", explicit) from exc
            return cls._apply_mapping(s, _section(explicit, data))

        cand.append(Path.cwd() / "delimio.toml")
        cand.append(Path.cwd() / "pyproject.toml")

        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError):
                continue
            cfg = _section(p, data)
            if cfg:
                return cls._apply_mapping(s, cfg)

        return s

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> IoSettings:
        """
        Load IoSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (delimio.toml, pyproject.toml).

        Returns:
            IoSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s


def _section(p: Path, data: dict[str, Any]) -> dict[str, Any] | None:
    if p.name == "pyproject.toml":
        # Expect [tool.delimio.io]
        tool = data.get("tool", {})
        if not isinstance(tool, dict):
            return None
        ours = tool.get("delimio", {})
        cfg = ours.get("io", {}) if isinstance(ours, dict) else None
        return cfg if isinstance(cfg, dict) else None
    # delimio.toml - accept either [io] table or top-level keys
    if "io" in data and isinstance(data["io"], dict):
        return data["io"]
    return data
