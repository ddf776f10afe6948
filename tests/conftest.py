from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Ensure the src/ directory is importable when tests run via `uv run pytest`.
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from pavlov import reset_settings  # noqa: E402

_ENV_VARS = ("PAVLOV_ENV", "PAVLOV_LOG_LEVEL", "PAVLOV_VALIDATE_TYPES", "PAVLOV_STRICT_TYPES")


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
