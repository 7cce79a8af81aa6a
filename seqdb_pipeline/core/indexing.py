#!/usr/bin/env python3

"""
Search index construction over the finished database file.
"""

import logging
from pathlib import Path

from .data_structures import SequenceType
from .exceptions import IndexingError
from .executor import CommandExecutor, CommandResult, PathLike


class BlastIndexer:
    """Build a BLAST database with makeblastdb."""

    def __init__(self, executor: CommandExecutor, program: str = "makeblastdb"):
        self.executor = executor
        self.program = program

    def build(self, sequences: PathLike, title: str, seq_type: SequenceType,
              log_path: PathLike) -> CommandResult:
        """
        Index the sequences file; raises IndexingError on failure.

        The tool writes its own log to log_path; its console output goes to
        a separate ``.out`` file next to it so the two never interleave.
        """
        log_path = Path(log_path)
        output_path = log_path.with_name(log_path.name + ".out")
        for path in (log_path, output_path):
            if path.exists():
                path.unlink()

        logging.info(f"Formatting BLAST database: {sequences}")
        command = [
            self.program, '-hash_index',
            '-in', str(sequences),
            '-dbtype', seq_type.value,
            '-title', title,
            '-parse_seqids',
            '-logfile', str(log_path),
        ]
        result = self.executor.run(command, log_path=output_path)
        if not result.ok:
            tool_log = log_path.read_text(errors='replace') if log_path.exists() else ""
            raise IndexingError(
                f"{self.program} failed with exit status {result.returncode}",
                tool_log + result.read_log()
            )
        return result
