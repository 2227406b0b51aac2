"""Shared fixtures for lambda-principal tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
import structlog

from lambda_principal.logging import LIBRARY_LOGGER, get_logging_settings
from lambda_principal.principal import Principal


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo any logging configuration a test installs."""
    yield
    structlog.reset_defaults()
    logging.getLogger(LIBRARY_LOGGER).setLevel(logging.NOTSET)
    get_logging_settings.cache_clear()


@pytest.fixture()
def principal() -> Principal:
    """Create a Principal with the default username and roles."""
    return Principal.from_parts("__default_username__", ["admin", "user"])
