from __future__ import annotations

from pathlib import Path

import pytest

from datevalue.config import reset_defaults

ENV_VARS = ("DATEVALUE_LOCALE", "DATEVALUE_FORMAT")


@pytest.fixture(autouse=True)
def clean_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    # an empty working directory keeps a developer's .env out of the defaults
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_defaults()
    yield
    reset_defaults()
