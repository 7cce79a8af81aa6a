#!/usr/bin/env python3

"""
Base classes and registry for source database adapters.

An adapter knows where its database lives, how to read the raw files and
how that database spells identifiers, accessions and descriptions in its
headers. Adapters register themselves by name with ``register_adapter``.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Set, Type

from ..core.acquisition import SourceFetcher
from ..core.data_structures import Record, SequenceType
from ..core.exceptions import AdapterError, UnknownSourceError
from ..core.parsers import FastaReader, disambiguate_id


ADAPTER_REGISTRY: Dict[str, Type['SourceAdapter']] = {}


def register_adapter(cls: Type['SourceAdapter']) -> Type['SourceAdapter']:
    """Class decorator adding an adapter to the registry under its name."""
    if cls.name in ADAPTER_REGISTRY:
        raise ValueError(f"Adapter already registered: {cls.name}")
    ADAPTER_REGISTRY[cls.name] = cls
    return cls


def available_sources() -> List[str]:
    return sorted(ADAPTER_REGISTRY)


def get_adapter(name: str, registry: Dict[str, Type['SourceAdapter']] = None) -> 'SourceAdapter':
    """Instantiate the adapter registered under name."""
    registry = ADAPTER_REGISTRY if registry is None else registry
    if name not in registry:
        raise UnknownSourceError(name, registry.keys())
    return registry[name]()


class SourceAdapter(ABC):
    """Base class for source database adapters."""

    name: str
    description: str = ""
    seq_type: SequenceType = SequenceType.NUCL

    @abstractmethod
    def acquire(self, fetcher: SourceFetcher, workdir: Path) -> Path:
        """
        Make the raw source available locally.

        Args:
            fetcher: Acquisition helper (clone, download, extract)
            workdir: Directory reserved for this source's raw files

        Returns:
            Path of the artifact ``load`` expects (file or directory)
        """
        pass

    @abstractmethod
    def load(self, source: Path) -> List[Record]:
        """Read the acquired artifact into canonical Records."""
        pass

    def error(self, message: str, record_id: str = "") -> AdapterError:
        return AdapterError(message, self.name, record_id)


class FastaSourceAdapter(SourceAdapter):
    """Adapter for databases distributed as FASTA files."""

    def fasta_files(self, source: Path) -> List[Path]:
        """FASTA files making up the database, in load order."""
        return [source]

    def repair(self, text: str) -> str:
        """Fix source-specific damage in the raw text before parsing."""
        return text

    @abstractmethod
    def transform(self, records: List[Record]) -> List[Record]:
        """Rewrite id/acc/desc according to this source's header grammar."""
        pass

    def convert_text(self, text: str, source: str = "<text>") -> List[Record]:
        """
        Parse raw FASTA text and normalize its headers.

        Repeated raw headers are split by the source grammar first; the
        ``_N`` suffix is then added to the rewritten ID, so it can never
        be mistaken for an accession or copy number.
        """
        reader = FastaReader(self.seq_type, rename_duplicates=False)
        records = reader.parse_text(self.repair(text), source=source)

        raw_seen: Set[str] = set()
        repeated = []
        for record in records:
            repeated.append(record.id in raw_seen)
            raw_seen.add(record.id)

        records = self.transform(records)

        seen: Dict[str, int] = {}
        for record, is_repeat in zip(records, repeated):
            if not is_repeat:
                seen.setdefault(record.id, 1)

        for record, is_repeat in zip(records, repeated):
            if not is_repeat:
                continue
            new_id = disambiguate_id(record.id, seen)
            if new_id != record.id:
                logging.warning(f"Duplicate ID '{record.id}' in {source}, renamed to '{new_id}'")
                record.id = new_id
        return records

    def load(self, source: Path) -> List[Record]:
        files = self.fasta_files(source)
        if not files:
            raise self.error(f"No sequence files found in {source}")

        records: List[Record] = []
        for fasta in files:
            logging.info(f"Parsing {fasta}")
            text = Path(fasta).read_text(errors='replace')
            records.extend(self.convert_text(text, source=str(fasta)))
        return records
