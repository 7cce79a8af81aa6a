#!/usr/bin/env python3

"""
Escherichia coli virulence factors collection (PHAC-NML ecoli_vf).

Two header shapes occur::

    >VFG000935(gi:2865308) (stx2A) Shiga toxin 2 subunit A [Escherichia coli O157:H7]
    >ECs1205 (stx2A) Shiga toxin 2 subunit A

Some records in the distributed file have their header glued to the end
of the previous sequence line.
"""

import re
from pathlib import Path
from typing import List

from ..core.acquisition import SourceFetcher
from ..core.data_structures import Record
from .base import FastaSourceAdapter, register_adapter


TOKEN_WITH_ACC = re.compile(r"^([^\s()]+)\(([^)]*)\)$")
TOKEN_ONLY = re.compile(r"^([^\s()]+)$")
STRAIN_SUFFIX = re.compile(r"\s*\[[^\]]*\]\s*$")
GENE_PREFIX = re.compile(r"^\(([^)]*)\)\s*(.*)$")


@register_adapter
class EcoliVfAdapter(FastaSourceAdapter):
    name = "ecoli_vf"
    description = "Escherichia coli virulence factors (PHAC-NML)"
    url = "https://raw.githubusercontent.com/phac-nml/ecoli_vf/master/data/repaired_ecoli_vfs_shortnames.ffn"

    def acquire(self, fetcher: SourceFetcher, workdir: Path) -> Path:
        return fetcher.download(self.url, workdir / "ecoli_vfs.ffn")

    def repair(self, text: str) -> str:
        lines = []
        for line in text.splitlines():
            # A header marker inside a sequence line starts a new record
            if not line.startswith('>') and '>' in line:
                sequence, header = line.split('>', 1)
                lines.extend([sequence, '>' + header])
            else:
                lines.append(line)
        return '\n'.join(lines) + '\n'

    def transform(self, records: List[Record]) -> List[Record]:
        for record in records:
            match = TOKEN_WITH_ACC.match(record.id)
            if match:
                record_id, accession = match.groups()
            else:
                match = TOKEN_ONLY.match(record.id)
                if not match:
                    raise self.error("header matches neither TOKEN(acc) nor TOKEN", record.id)
                record_id = accession = match.group(1)

            desc = STRAIN_SUFFIX.sub('', record.desc)
            gene = GENE_PREFIX.match(desc)
            if gene and gene.group(1):
                record_id, desc = gene.groups()

            record.id = record_id
            record.acc = accession
            record.desc = desc
        return records
