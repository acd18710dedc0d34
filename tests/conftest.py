from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

BOOL_POLICY_ENV = "FLIP_BOOL_POLICY"


@pytest.fixture(autouse=True)
def _bool_policy_env_fixture(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(BOOL_POLICY_ENV, raising=False)
    yield


@pytest.fixture
def bool_policy_env(monkeypatch: pytest.MonkeyPatch):
    def _set(value: str | None) -> None:
        if value is None:
            monkeypatch.delenv(BOOL_POLICY_ENV, raising=False)
        else:
            monkeypatch.setenv(BOOL_POLICY_ENV, value)

    return _set


@pytest.fixture
def write_config(tmp_path: Path):
    def _write(body: str, *, name: str = "flip.toml") -> Path:
        path = tmp_path / name
        path.write_text(body, encoding="utf-8")
        return path

    return _write
