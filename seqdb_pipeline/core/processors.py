#!/usr/bin/env python3

"""
Processing classes for reading-frame validation and sequence deduplication.
"""

import logging
import re
from typing import Dict, List, Tuple

from Bio.Seq import Seq

from .data_structures import Record, SequenceType


_NON_ACGT = re.compile(r"[^AGTC]")


def translate(sequence: str) -> str:
    """Translate a nucleotide sequence with the standard genetic code."""
    return str(Seq(sequence).translate())


def reverse_complement(sequence: str) -> str:
    """Get reverse complement of DNA sequence."""
    return str(Seq(sequence).reverse_complement())


def has_internal_stop(sequence: str) -> bool:
    """True if the translation has a stop codon before the final codon."""
    protein = translate(sequence)
    if protein.endswith('*'):
        protein = protein[:-1]
    return '*' in protein


class OrfValidator:
    """Full-gene check: length, alphabet and uninterrupted translation."""

    def __init__(self):
        self.checked = 0
        self.rejected = 0
        self.repaired = 0

    def check(self, record: Record) -> int:
        """
        Check that a nucleotide record is a complete open reading frame.

        A record whose forward translation has an internal stop but whose
        reverse complement translates cleanly is repaired in place.

        Returns:
            Sequence length if the record passes, 0 if it is rejected
        """
        if record.seq_type is not SequenceType.NUCL:
            return record.length

        self.checked += 1
        length = record.length

        if length % 3 != 0:
            logging.warning(f"{record.id} - length {length} is not multiple of 3")
            self.rejected += 1
            return 0

        if _NON_ACGT.search(record.seq):
            logging.warning(f"{record.id} - has non-AGTC bases")
            self.rejected += 1
            return 0

        if has_internal_stop(record.seq):
            logging.warning(f"{record.id} - has internal stop codons, trying reverse complement")
            revcom = reverse_complement(record.seq)
            if has_internal_stop(revcom):
                logging.warning(f"{record.id} - reverse complement has internal stop codons too")
                self.rejected += 1
                return 0

            logging.info(f"{record.id} - reverse complement resolves internal stops")
            record.seq = revcom
            self.repaired += 1

        return length

    def get_summary(self) -> Dict[str, int]:
        return {
            'checked': self.checked,
            'rejected': self.rejected,
            'repaired': self.repaired
        }


class SequenceDeduplicator:
    """Drop records whose sequence exactly repeats an earlier record."""

    def __init__(self):
        self.collisions: List[Tuple[str, str]] = []

    def deduplicate(self, records: List[Record]) -> List[Record]:
        """Keep the first record per distinct sequence, preserving order."""
        seen: Dict[str, str] = {}
        kept: List[Record] = []

        for record in records:
            if record.seq in seen:
                kept_id = seen[record.seq]
                logging.warning(f"Duplicate sequence {record.id} same as {kept_id}")
                self.collisions.append((record.id, kept_id))
                continue
            seen[record.seq] = record.id
            kept.append(record)

        if self.collisions:
            logging.info(f"Removed {len(records) - len(kept)} duplicate sequences")
        return kept
