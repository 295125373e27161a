"""Shared pytest fixtures."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from netdiag.config import reset_config

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def clean_config(monkeypatch: pytest.MonkeyPatch):
    """Isolate every test from NETDIAG_* variables and the cached config."""
    for key in list(os.environ):
        if key.startswith("NETDIAG_"):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR
