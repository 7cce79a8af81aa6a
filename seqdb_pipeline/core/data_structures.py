#!/usr/bin/env python3

"""
Core data structures for the sequence database pipeline.

Defines the canonical record every source adapter produces and the
molecule types a database can hold.
"""

import hashlib
import re
from dataclasses import dataclass
from enum import Enum


class SequenceType(Enum):
    """Molecule kind of a database; decides alphabet and wildcard."""
    NUCL = "nucl"
    PROT = "prot"

    @property
    def alphabet(self) -> str:
        """Characters kept verbatim after sanitization."""
        if self is SequenceType.NUCL:
            return "AGTC"
        return "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

    @property
    def wildcard(self) -> str:
        """Replacement for characters outside the alphabet."""
        return "N" if self is SequenceType.NUCL else "X"

    def sanitize(self, sequence: str) -> str:
        """Uppercase a sequence and replace foreign characters with the wildcard."""
        return _DISALLOWED[self].sub(self.wildcard, sequence.upper())


_DISALLOWED = {
    SequenceType.NUCL: re.compile(r"[^AGTC]"),
    SequenceType.PROT: re.compile(r"[^A-Z]"),
}


@dataclass
class Record:
    """One entry of a sequence database in canonical form."""
    id: str
    acc: str = ""
    desc: str = ""
    seq: str = ""
    seq_type: SequenceType = SequenceType.NUCL

    def __post_init__(self):
        """Validate record data after initialization."""
        if not self.id:
            raise ValueError("Record ID cannot be empty")

    @property
    def length(self) -> int:
        """Get sequence length."""
        return len(self.seq)

    @property
    def display_desc(self) -> str:
        """Description written to the output; falls back to the ID."""
        return self.desc or self.id

    def get_seq_hash(self) -> str:
        """Get MD5 hash of the sequence."""
        if not self.seq:
            return ""
        return hashlib.md5(self.seq.encode()).hexdigest()
