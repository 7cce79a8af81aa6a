#!/usr/bin/env python3

"""
Sequence Database Pipeline

Builds normalized, searchable sequence databases from public
antimicrobial resistance, virulence factor and plasmid marker
collections.

Every source is read by its own adapter, which rewrites that source's
header conventions into one canonical record (ID, accession, description,
sequence). Records then pass a full-gene reading-frame check, exact
duplicate removal and are written as a FASTA file with
``database~~~id~~~accession`` identifiers for indexing.

Modules:
- core: Record model, exceptions, configuration, FASTA I/O, processors
- adapters: One adapter per source database and the adapter registry
- utils: Performance monitoring
- tests: Unit test suite
"""

__version__ = "1.0.0"
__author__ = "Sequence Database Pipeline Team"

# Import main components for easy access
from .core.data_structures import Record, SequenceType
from .core.exceptions import (
    PipelineError, ParseError, AdapterError, UnknownSourceError,
    ConfigurationError, AcquisitionError, IndexingError, MemoryLimitError
)
from .core.config import PipelineConfig, load_config
from .core.pipeline import DatabaseBuildPipeline
from .adapters import ADAPTER_REGISTRY, get_adapter, available_sources

__all__ = [
    # Main pipeline
    'DatabaseBuildPipeline',
    # Data structures
    'Record', 'SequenceType',
    # Exceptions
    'PipelineError', 'ParseError', 'AdapterError', 'UnknownSourceError',
    'ConfigurationError', 'AcquisitionError', 'IndexingError', 'MemoryLimitError',
    # Configuration
    'PipelineConfig', 'load_config',
    # Adapters
    'ADAPTER_REGISTRY', 'get_adapter', 'available_sources'
]
