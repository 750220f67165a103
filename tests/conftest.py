from __future__ import annotations

import logging

import pytest

from todokit.core.validation import clear_validator_cache


@pytest.fixture(autouse=True)
def isolate_todokit_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("TODOKIT_LOG_TO_FILE", "off")
    monkeypatch.delenv("TODOKIT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("TODOKIT_LOG_DIR", raising=False)
    monkeypatch.delenv("TODOKIT_SCHEMA_PATH", raising=False)
    monkeypatch.delenv("TODOKIT_ROOT", raising=False)
    monkeypatch.delenv("TODOKIT_TODO_FILE", raising=False)
    monkeypatch.delenv("TODOKIT_CHANGELOG_FILE", raising=False)
    monkeypatch.delenv("TODOKIT_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def reset_validator_and_logging():
    clear_validator_cache()
    yield
    clear_validator_cache()
    logger = logging.getLogger("todokit")
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
