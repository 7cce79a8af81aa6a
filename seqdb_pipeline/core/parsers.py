#!/usr/bin/env python3

"""
Readers and writers for the multi-record FASTA sequence store.

The reader turns raw source files into Records; the writer emits the
canonical database file whose identifiers are ``db~~~id~~~acc``.
"""

import io
import logging
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, TextIO, Tuple, Union

from .data_structures import Record, SequenceType
from .exceptions import ParseError


def disambiguate_id(record_id: str, seen: Dict[str, int]) -> str:
    """
    Return record_id, or record_id_N when it is already taken.

    seen maps every ID handed out so far to the last suffix tried for it;
    the returned ID is added to it. N skips suffixes that are themselves
    taken, so x, x_2, x yields x, x_2, x_3.
    """
    if record_id not in seen:
        seen[record_id] = 1
        return record_id

    n = seen[record_id]
    candidate = record_id
    while candidate in seen:
        n += 1
        candidate = f"{record_id}_{n}"
    seen[record_id] = n
    seen[candidate] = 1
    return candidate


class FastaReader:
    """Parse FASTA text into Records with sanitized sequences."""

    def __init__(self, seq_type: SequenceType = SequenceType.NUCL, rename_duplicates: bool = True):
        self.seq_type = seq_type
        # Adapters turn this off and rename after rewriting the header
        self.rename_duplicates = rename_duplicates

    def load(self, file_path: Union[str, Path]) -> List[Record]:
        """Parse a FASTA file from disk."""
        try:
            with open(file_path, 'r', errors='replace') as f:
                return self.parse(f, source=str(file_path))
        except FileNotFoundError:
            raise ParseError(f"Sequence file not found: {file_path}")

    def parse_text(self, text: str, source: str = "<text>") -> List[Record]:
        """Parse FASTA content held in memory."""
        return self.parse(io.StringIO(text), source=source)

    def parse(self, lines: Iterable[str], source: str = "<stream>") -> List[Record]:
        """Parse an iterable of FASTA lines into an ordered list of Records."""
        records: List[Record] = []
        seen: Dict[str, int] = {}
        current = None
        current_seq: List[str] = []

        for line_num, line in enumerate(lines, 1):
            line = line.rstrip('\r\n')

            if line.startswith('>'):
                if current is not None:
                    records.append(self._finish(current, current_seq))

                current = self._parse_header(line, seen, source, line_num)
                current_seq = []

            elif line.strip():
                if current is None:
                    raise ParseError("Sequence data before first header", source, line_num)
                current_seq.append(''.join(line.split()))

        if current is not None:
            records.append(self._finish(current, current_seq))

        logging.info(f"Loaded {len(records)} sequences from {source}")
        return records

    def _parse_header(self, line: str, seen: Dict[str, int], source: str, line_num: int) -> Tuple[str, str]:
        """Split a header line into (id, description), disambiguating repeats."""
        parts = line[1:].split(None, 1)
        if not parts or line[1:2].isspace():
            raise ParseError("Empty sequence identifier", source, line_num)

        record_id = parts[0]
        desc = parts[1].strip() if len(parts) > 1 else ""

        if self.rename_duplicates:
            new_id = disambiguate_id(record_id, seen)
            if new_id != record_id:
                logging.warning(f"Duplicate ID '{record_id}' in {source}, renamed to '{new_id}'")
                record_id = new_id

        return record_id, desc

    def _finish(self, header: Tuple[str, str], seq_parts: List[str]) -> Record:
        record_id, desc = header
        return Record(
            id=record_id,
            desc=desc,
            seq=self.seq_type.sanitize(''.join(seq_parts)),
            seq_type=self.seq_type
        )


class FastaWriter:
    """Write Records as the canonical, database-prefixed FASTA file."""

    def __init__(self, database: str, separator: str = "~~~", line_width: int = 60):
        self.database = database
        self.separator = separator
        self.line_width = line_width
        self.id_counts: Counter = Counter()

    def composite_id(self, record: Record) -> str:
        """Build the globally unique identifier for a record."""
        return self.separator.join([self.database, record.id, record.acc])

    def format_record(self, record: Record) -> str:
        """Format one record as a FASTA entry."""
        lines = [f">{self.composite_id(record)} {record.display_desc}"]
        for i in range(0, len(record.seq), self.line_width):
            lines.append(record.seq[i:i + self.line_width])
        return '\n'.join(lines) + '\n'

    def write(self, records: Iterable[Record], handle: TextIO) -> int:
        """Write records to an open handle; returns the number written."""
        written = 0
        for record in records:
            self.id_counts[record.id] += 1
            freq = self.id_counts[record.id]
            if freq > 1:
                logging.warning(f"Duplicate ({freq}) ID: {record.id}")
            handle.write(self.format_record(record))
            written += 1
        return written

    def save(self, records: Iterable[Record], file_path: Union[str, Path]) -> int:
        """Write records to a file; returns the number written."""
        with open(file_path, 'w') as f:
            written = self.write(records, f)
        logging.info(f"Wrote {written} sequences to {file_path}")
        return written


def split_composite_id(identifier: str, separator: str = "~~~") -> Tuple[str, str, str]:
    """Decode a ``db~~~id~~~acc`` identifier into its three fields."""
    parts = identifier.split(separator)
    if len(parts) != 3 or not parts[0] or not parts[1]:
        raise ParseError(f"Not a composite identifier: {identifier!r}")
    return parts[0], parts[1], parts[2]
