#!/usr/bin/env python3

"""
ResFinder acquired resistance genes.

Headers look like ``blaTEM-1B_1_JF910132``: gene name, copy number and
accession joined by underscores. Descriptions come from ``notes.txt``.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List

from ..core.acquisition import SourceFetcher
from ..core.data_structures import Record
from .base import FastaSourceAdapter, register_adapter


def parse_notes(lines: Iterable[str]) -> Dict[str, str]:
    """Parse ``name:class:description`` annotation lines into name -> description."""
    notes = {}
    for line in lines:
        line = line.rstrip('\n').rstrip('\r')
        if not line or line.startswith('#'):
            continue
        fields = line.split(':')
        notes[fields[0]] = ':'.join(fields[2:])
    return notes


@register_adapter
class ResFinderAdapter(FastaSourceAdapter):
    name = "resfinder"
    description = "ResFinder acquired antimicrobial resistance genes"
    url = "https://bitbucket.org/genomicepidemiology/resfinder_db.git"

    def __init__(self, notes: Dict[str, str] = None):
        self.notes = notes or {}

    def acquire(self, fetcher: SourceFetcher, workdir: Path) -> Path:
        return fetcher.git_clone(self.url, workdir / "resfinder_db")

    def fasta_files(self, source: Path) -> List[Path]:
        return sorted(source.glob('*.fsa'))

    def load(self, source: Path) -> List[Record]:
        notes_file = source / 'notes.txt'
        if notes_file.exists():
            with open(notes_file, 'r', errors='replace') as f:
                self.notes = parse_notes(f)
            logging.info(f"Loaded {len(self.notes)} annotations from {notes_file}")
        else:
            logging.warning(f"No annotation file {notes_file}, descriptions will be empty")
        return super().load(source)

    def transform(self, records: List[Record]) -> List[Record]:
        for record in records:
            parts = record.id.rsplit('_', 2)
            if len(parts) != 3 or not all(parts):
                raise self.error("header is not name_copy_accession", record.id)

            name, copy, accession = parts
            record.id = f"{name}_{copy}"
            record.acc = accession
            record.desc = self.notes.get(name, "")
        return records
