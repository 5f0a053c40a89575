from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from article_reader.dependencies import reset_cached_dependencies


@pytest.fixture(autouse=True)
def _isolated_runtime(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:  # pyright: ignore[reportUnusedFunction]
    home_dir = tmp_path / "home"
    home_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("ARTICLE_READER_DATA_DIR", str(tmp_path / "runtime-data"))
    monkeypatch.setenv("ARTICLE_READER_TELEMETRY_SINK", "none")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("ARTICLE_READER_GEMINI_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)
    reset_cached_dependencies()
    yield
    reset_cached_dependencies()
