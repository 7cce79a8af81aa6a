#!/usr/bin/env python3

"""
NCBI Bacterial Antimicrobial Resistance Reference Gene Database.

Distributed as GenBank records (BioProject PRJNA313047); each record's
first CDS feature carries the gene naming tags.
"""

import logging
from pathlib import Path
from typing import List, TextIO

from Bio import SeqIO

from ..core.acquisition import SourceFetcher
from ..core.data_structures import Record, SequenceType
from .base import SourceAdapter, register_adapter


BIOPROJECT = "PRJNA313047"
ID_TAGS = ('allele', 'gene', 'locus_tag')


def _first_tag(feature, tag: str) -> str:
    values = feature.qualifiers.get(tag) or [""]
    return values[0].strip()


@register_adapter
class NcbiAdapter(SourceAdapter):
    name = "ncbi"
    description = "NCBI AMRFinder reference gene catalog (BioProject PRJNA313047)"

    def acquire(self, fetcher: SourceFetcher, workdir: Path) -> Path:
        script = (f"esearch -db nucleotide -query '{BIOPROJECT}[BioProject]'"
                  f" | efetch -format gbwithparts > ncbi.gbk")
        return fetcher.run_shell(script, workdir / "ncbi.gbk")

    def load(self, source: Path) -> List[Record]:
        if not source.exists():
            raise self.error(f"GenBank file not found: {source}")

        logging.info(f"Parsing {source}")
        with open(source, 'r') as f:
            return self.parse_genbank(f)

    def parse_genbank(self, handle: TextIO) -> List[Record]:
        """Convert GenBank records to Records using their first CDS."""
        records = []
        for entry in SeqIO.parse(handle, "genbank"):
            cds = next((f for f in entry.features if f.type == 'CDS'), None)
            if cds is None:
                raise self.error("record has no CDS feature", entry.id)

            record_id = next((_first_tag(cds, tag) for tag in ID_TAGS if _first_tag(cds, tag)), "")
            if not record_id:
                raise self.error("CDS has no allele, gene or locus_tag", entry.id)

            records.append(Record(
                id=record_id,
                acc=_first_tag(cds, 'locus_tag'),
                desc=_first_tag(cds, 'product'),
                seq=SequenceType.NUCL.sanitize(str(cds.extract(entry.seq))),
                seq_type=SequenceType.NUCL
            ))

        logging.info(f"Loaded {len(records)} coding sequences from GenBank")
        return records
