"""
ergo-kb core layer.

Loads the ErgoScript knowledge base (eUTXO model, secure patterns, known
issues, audit guidance) from any of its serializations into a read-only
ChunkIndex for retrieval-augmented prompting. Contains:
- Chunk model and ChunkIndex
- Format loaders and the loader factory
- Cross-format parity checking and exporters
- Exception hierarchy, configuration and logging service

License: MIT
"""

from .config import ErgoKBSettings, get_config_summary, settings
from .exceptions import (
    ErgoKBError,
    NotFoundError,
    ParityError,
    ProcessingError,
    ValidationError,
)
from .index import ChunkIndex
from .knowledge_base import (
    REQUIRED_SECTION_IDS,
    SECTION_IDS,
    bundled_path,
    check_required_sections,
    load_corpus,
    load_default_index,
    load_files,
    load_index,
)
from .logging_service import LoggingConfig, LoggingService
from .models import Chunk
from .parity import ParityChecker, ParityIssue, ParityReport, check_parity

__version__ = "0.1.0"

__all__ = [
    # Exceptions
    "ErgoKBError",
    "ValidationError",
    "NotFoundError",
    "ProcessingError",
    "ParityError",
    # Configuration
    "ErgoKBSettings",
    "settings",
    "get_config_summary",
    # Logging
    "LoggingService",
    "LoggingConfig",
    # Chunk store
    "Chunk",
    "ChunkIndex",
    # Knowledge base
    "SECTION_IDS",
    "REQUIRED_SECTION_IDS",
    "bundled_path",
    "check_required_sections",
    "load_corpus",
    "load_default_index",
    "load_files",
    "load_index",
    # Parity
    "ParityChecker",
    "ParityIssue",
    "ParityReport",
    "check_parity",
]
