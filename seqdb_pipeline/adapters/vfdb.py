#!/usr/bin/env python3

"""
VFDB, the Virulence Factor Database (core set A, nucleotide).

Headers look like::

    >VFG037176(gb|WP_001081735) (plc1) phospholipase C [Phospholipase C (VF0470) - Exotoxin (VFC0235)] [Acinetobacter baumannii ACICU]
"""

import logging
import re
from pathlib import Path
from typing import List

from ..core.acquisition import SourceFetcher
from ..core.data_structures import Record
from .base import FastaSourceAdapter, register_adapter


VFG_ID = re.compile(r"^(\w+)\((\w+)\|([^)]+)\)$")
GENE_PREFIX = re.compile(r"^\(([^)]+)\)")


@register_adapter
class VfdbAdapter(FastaSourceAdapter):
    name = "vfdb"
    description = "Virulence Factor Database core set (setA)"
    url = "http://www.mgc.ac.cn/VFs/Down/VFDB_setA_nt.fas.gz"

    def acquire(self, fetcher: SourceFetcher, workdir: Path) -> Path:
        archive = fetcher.download(self.url, workdir / "VFDB_setA_nt.fas.gz")
        return fetcher.gunzip(archive)

    def transform(self, records: List[Record]) -> List[Record]:
        for record in records:
            match = VFG_ID.match(record.id)
            if not match:
                raise self.error("header is not VFGxxxxxx(db|accession)", record.id)

            vfg, _db, accession = match.groups()
            record.acc = accession

            gene = GENE_PREFIX.match(record.desc)
            if gene:
                record.id = gene.group(1)
            else:
                logging.warning(f"No gene name in description of {record.id}, using {vfg}")
                record.id = vfg
        return records
