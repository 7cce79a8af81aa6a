#!/usr/bin/env python3

"""
Source adapters, one per upstream database.

Importing this package registers every adapter in ADAPTER_REGISTRY.
"""

from .base import (
    ADAPTER_REGISTRY, SourceAdapter, FastaSourceAdapter,
    register_adapter, get_adapter, available_sources
)
from . import argannot, bacmet2, card, ecoh, ecoli_vf, ncbi, plasmidfinder, resfinder, vfdb

__all__ = [
    'ADAPTER_REGISTRY', 'SourceAdapter', 'FastaSourceAdapter',
    'register_adapter', 'get_adapter', 'available_sources'
]
