"""
Unit test fixtures.

Isolates unit tests from environment variables (.env file) and provides
small knowledge-base fixtures.

License: MIT
"""

import os

import pytest

from ergo_kb_core.index import ChunkIndex
from ergo_kb_core.models import Chunk

# Environment variables that affect ErgoKBSettings defaults
CONFIG_ENV_VARS = [
    "ERGO_KB_KB_DIR",
    "ERGO_KB_DEFAULT_FORMAT",
    "ERGO_KB_MAX_FILE_SIZE",
    "ERGO_KB_MARKDOWN_SECTION_LEVEL",
    "ERGO_KB_RST_SECTION_CHAR",
    "ERGO_KB_STRICT_PARITY",
    "ERGO_KB_LOG_LEVEL",
    "ERGO_KB_LOG_FORMAT",
]


@pytest.fixture(autouse=True)
def clean_env_for_unit_tests(monkeypatch, tmp_path):
    """
    Remove config-related environment variables and run from a temp
    directory so no .env file is picked up.
    """
    for var in CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    original_dir = os.getcwd()
    os.chdir(tmp_path)
    yield
    os.chdir(original_dir)


@pytest.fixture
def abc_chunks():
    """The three-chunk store: a{x}, b{x,y}, c{z}."""
    return [
        Chunk(id="a", title="A", tags=["x"], text="alpha"),
        Chunk(id="b", title="B", tags=["x", "y"], text="beta"),
        Chunk(id="c", title="C", tags=["z"], text="gamma"),
    ]


@pytest.fixture
def abc_index(abc_chunks):
    return ChunkIndex(abc_chunks, source="abc")
