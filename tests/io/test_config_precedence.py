from __future__ import annotations

from pathlib import Path

import pytest

from delimio.io.config import IoSettings
from delimio.io.errors import IoConfigError

_ENV_KEYS = [
    "DELIMIO_IO_BUFFER_SIZE",
    "DELIMIO_IO_GZIP_LEVEL",
    "DELIMIO_IO_ZSTD_LEVEL",
    "DELIMIO_IO_ENCODING",
    "DELIMIO_IO_SNIFF_CONTENT",
]


def _write_delimio_toml(tmp: Path, content: str) -> Path:
    p = tmp / "delimio.toml"
    p.write_text(content)
    return p


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_io_settings_precedence_env_over_toml(tmp_path: Path, monkeypatch) -> None:
    _write_delimio_toml(
        tmp_path,
        """
        [io]
        gzip_level = 1
        zstd_level = 7
        encoding = "latin-1"
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DELIMIO_IO_GZIP_LEVEL", "9")
    monkeypatch.setenv("DELIMIO_IO_SNIFF_CONTENT", "yes")

    s = IoSettings.load()

    assert s.gzip_level == 9  # env override
    assert s.zstd_level == 7  # from TOML
    assert s.encoding == "latin-1"
    assert s.sniff_content is True


def test_io_settings_from_pyproject_tool_table(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "pyproject.toml").write_text(
        """
        [tool.delimio.io]
        buffer_size = 4096
        """.strip()
    )
    monkeypatch.chdir(tmp_path)

    s = IoSettings.load()

    assert s.buffer_size == 4096
    assert s.gzip_level == 5


def test_io_settings_defaults_without_files(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    s = IoSettings.load()
    assert s == IoSettings()
    assert (s.buffer_size, s.gzip_level, s.zstd_level, s.encoding) == (64 * 1024, 5, 3, "utf-8")


def test_io_settings_ignores_uncoercible_values(monkeypatch) -> None:
    monkeypatch.setenv("DELIMIO_IO_BUFFER_SIZE", "lots")
    assert IoSettings.from_env().buffer_size == IoSettings().buffer_size


def test_explicit_toml_path_errors(tmp_path: Path) -> None:
    with pytest.raises(IoConfigError):
        IoSettings.from_toml(tmp_path / "missing.toml")
    broken = _write_delimio_toml(tmp_path, "gzip_level = [")
    with pytest.raises(IoConfigError):
        IoSettings.from_toml(broken)


@pytest.mark.parametrize(
    "settings",
    [
        IoSettings(buffer_size=0),
        IoSettings(gzip_level=10),
        IoSettings(zstd_level=0),
        IoSettings(encoding="no-such-codec"),
    ],
)
def test_validate_rejects_out_of_range(settings: IoSettings) -> None:
    with pytest.raises(IoConfigError):
        settings.validate()
