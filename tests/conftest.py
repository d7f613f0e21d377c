"""
Every test runs in an empty working directory with a clean settings cache, so a config.toml or .env
in the checkout never leaks into the settings under test.
"""
from __future__ import annotations

import logging
import os

import pytest

from websim.config import clear_settings_cache


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("WEBSIM_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
