"""Shared fixtures for the morphcore test suite."""

from collections.abc import Iterator
from pathlib import Path
from typing import Final

import pytest
from loguru import logger

from morphcore.tagging.resolver import TagResolver

FIXTURES_DIR: Final[Path] = Path(__file__).parent / "fixtures"


@pytest.fixture
def resolver() -> TagResolver:
    """Create a non-strict resolver over the German tag set."""
    return TagResolver()


@pytest.fixture
def strict_resolver() -> TagResolver:
    """Create a strict resolver over the German tag set."""
    return TagResolver(strict=True)


@pytest.fixture
def dictionary_dump_path() -> Path:
    """Path to the sample tagger dictionary dump."""
    return FIXTURES_DIR / "german_dict_sample.tsv"


@pytest.fixture
def confusion_sample_path() -> Path:
    """Path to the sample confusion-set resource."""
    return FIXTURES_DIR / "confusion_sample.txt"


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru messages emitted while the test runs."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
