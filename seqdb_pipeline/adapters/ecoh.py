#!/usr/bin/env python3

"""
EcOH E. coli O and H antigen typing alleles (from SRST2).

Headers are ``cluster__gene__allele__seqid accession;product;type``.
"""

from pathlib import Path
from typing import List

from ..core.acquisition import SourceFetcher
from ..core.data_structures import Record
from .base import FastaSourceAdapter, register_adapter


@register_adapter
class EcohAdapter(FastaSourceAdapter):
    name = "ecoh"
    description = "EcOH E. coli O-antigen and H-antigen genes"
    url = "https://raw.githubusercontent.com/katholt/srst2/master/data/EcOH.fasta"

    def acquire(self, fetcher: SourceFetcher, workdir: Path) -> Path:
        return fetcher.download(self.url, workdir / "EcOH.fasta")

    def transform(self, records: List[Record]) -> List[Record]:
        for record in records:
            fields = record.id.split('__')
            if len(fields) < 3 or not fields[2]:
                raise self.error("header is not cluster__gene__allele__seqid", record.id)
            if not record.desc:
                raise self.error("header has no accession;description part", record.id)

            desc_fields = record.desc.split(';')
            record.id = fields[2]
            record.acc = desc_fields[0]
            record.desc = ' '.join(desc_fields[1:])
        return records
