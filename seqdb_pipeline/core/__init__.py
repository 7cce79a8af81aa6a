#!/usr/bin/env python3

"""
Core module for the sequence database pipeline.

Contains the record model, exception types, configuration management
and the FASTA reader/writer.
"""

from .data_structures import Record, SequenceType
from .exceptions import (
    PipelineError, ParseError, AdapterError, UnknownSourceError,
    ConfigurationError, AcquisitionError, IndexingError, MemoryLimitError
)
from .config import PipelineConfig, load_config
from .parsers import FastaReader, FastaWriter, split_composite_id

__all__ = [
    'Record', 'SequenceType',
    'PipelineError', 'ParseError', 'AdapterError', 'UnknownSourceError',
    'ConfigurationError', 'AcquisitionError', 'IndexingError', 'MemoryLimitError',
    'PipelineConfig', 'load_config',
    'FastaReader', 'FastaWriter', 'split_composite_id'
]
