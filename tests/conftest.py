"""
Configuration for pytest: import paths and shared fixtures.
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from types import SimpleNamespace

import pytest


# Add the parent directory to Python path so we can import lazy, combinators, etc.
parent_dir = Path(__file__).parent.parent
sys.path.insert(0, str(parent_dir))

# Import after path setup
from models import Record
from utils import configure, reset_settings


@dataclass
class Shirt:
    size: str
    colour: str


class CountingSource:
    """Infinite producer that records how many elements were pulled from it."""

    def __init__(self):
        self.pulled = 0

    def __iter__(self):
        return self

    def __next__(self):
        value = self.pulled
        self.pulled += 1
        return value


@pytest.fixture
def counting_source():
    """Fresh infinite counting producer"""
    return CountingSource()


@pytest.fixture
def shirts():
    """The size/colour example used by the grouping tests"""
    return [
        {"size": "m", "colour": "blue"},
        {"size": "m", "colour": "red"},
        {"size": "l", "colour": "blue"},
    ]


@pytest.fixture
def records():
    """One value of each record flavour with fields a=1, b=2"""
    return [
        Record(a=1, b=2),
        SimpleNamespace(a=1, b=2),
        Shirt(size="m", colour="blue"),
    ]


@pytest.fixture
def strict_get():
    """Turn on strict get() for the duration of a test"""
    configure(strict_get=True)
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def _restore_settings():
    yield
    reset_settings()
