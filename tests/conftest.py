"""Shared fixtures: the Star Wars example schema from example/starwars.py."""

import sys
from pathlib import Path

import pytest

EXAMPLE_DIR = Path(__file__).resolve().parent.parent / "example"

if str(EXAMPLE_DIR) not in sys.path:
    sys.path.insert(0, str(EXAMPLE_DIR))

import starwars  # noqa: E402


@pytest.fixture
def example_dir() -> Path:
    return EXAMPLE_DIR


@pytest.fixture
def root():
    return starwars.root


@pytest.fixture
def database():
    return starwars.Database()
