#!/usr/bin/env python3

"""
ARG-ANNOT antibiotic resistance genes.

Headers are ``(class)gene:accession:coordinates:length``, e.g.
``(AGly)AadA6:AF140629:2289-3080:792``.
"""

import re
from pathlib import Path
from typing import List

from ..core.acquisition import SourceFetcher
from ..core.data_structures import Record
from .base import FastaSourceAdapter, register_adapter


# Control characters except tab and newline; the distributed file has stray escapes
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")


@register_adapter
class ArgAnnotAdapter(FastaSourceAdapter):
    name = "argannot"
    description = "ARG-ANNOT antibiotic resistance gene nucleotide sequences"
    url = ("http://backup.mediterranee-infection.com/arkotheque/client/ihumed/"
           "_depot_arko/articles/2041/arg-annot-nt-v3-march2017_doc.fasta")

    def acquire(self, fetcher: SourceFetcher, workdir: Path) -> Path:
        return fetcher.download(self.url, workdir / "arg-annot.fasta")

    def repair(self, text: str) -> str:
        return CONTROL_CHARS.sub('', text.replace('\r\n', '\n'))

    def transform(self, records: List[Record]) -> List[Record]:
        for record in records:
            fields = record.id.split(':')
            if len(fields) < 3 or not fields[0]:
                raise self.error("header is not gene:accession:coordinates", record.id)

            record.id = fields[0]
            record.acc = ':'.join(fields[1:3])
            record.desc = ""
        return records
