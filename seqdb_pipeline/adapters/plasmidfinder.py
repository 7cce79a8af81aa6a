#!/usr/bin/env python3

"""
PlasmidFinder replicon markers.

Headers are ``replicon_accession``, e.g. ``IncFIB_AP001918.1`` or
``rep7_NC_010063.1``, sometimes with extra underscores in between.
"""

import logging
import re
from pathlib import Path
from typing import List

from ..core.acquisition import SourceFetcher
from ..core.data_structures import Record
from .base import FastaSourceAdapter, register_adapter


ACCESSION_SUFFIX = re.compile(r"_(NC_\d+(?:\.\d+)?|[A-Z]+\d+(?:\.\d+)?)$")


@register_adapter
class PlasmidFinderAdapter(FastaSourceAdapter):
    name = "plasmidfinder"
    description = "PlasmidFinder plasmid replicon sequences"
    url = "https://bitbucket.org/genomicepidemiology/plasmidfinder_db.git"

    def acquire(self, fetcher: SourceFetcher, workdir: Path) -> Path:
        return fetcher.git_clone(self.url, workdir / "plasmidfinder_db")

    def fasta_files(self, source: Path) -> List[Path]:
        return sorted(source.glob('*.fsa'))

    def transform(self, records: List[Record]) -> List[Record]:
        for record in records:
            original = record.id
            record.desc = original

            match = ACCESSION_SUFFIX.search(original)
            if not match:
                logging.warning(f"No accession found in plasmidfinder ID: {original}")
                continue

            name = original[:match.start()].rstrip('_')
            record.acc = match.group(1)
            if name:
                record.id = name
            else:
                logging.warning(f"Empty ID after removing accession from {original}, keeping original")
        return records
