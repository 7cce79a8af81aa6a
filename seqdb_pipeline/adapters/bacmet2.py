#!/usr/bin/env python3

"""
BacMet2 experimentally confirmed biocide and metal resistance genes.

Headers are ``BAC0098|ctpC|sp|P0A502|CTPC_MYCTU`` followed by a free
text description. The database is protein.
"""

from pathlib import Path
from typing import List

from ..core.acquisition import SourceFetcher
from ..core.data_structures import Record, SequenceType
from .base import FastaSourceAdapter, register_adapter


@register_adapter
class BacMet2Adapter(FastaSourceAdapter):
    name = "bacmet2"
    description = "BacMet2 antibacterial biocide and metal resistance proteins"
    seq_type = SequenceType.PROT
    url = "http://bacmet.biomedicine.gu.se/download/BacMet2_EXP_database.fasta"

    def acquire(self, fetcher: SourceFetcher, workdir: Path) -> Path:
        return fetcher.download(self.url, workdir / "BacMet2_EXP_database.fasta")

    def transform(self, records: List[Record]) -> List[Record]:
        for record in records:
            fields = record.id.split('|')
            if len(fields) < 4 or not fields[0] or not fields[1]:
                raise self.error("header is not id|gene|db|accession", record.id)

            bacmet_id, gene, db, accession = fields[:4]
            record.id = f"{gene}-{bacmet_id}"
            record.acc = f"{db}:{accession}"
        return records
