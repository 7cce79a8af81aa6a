#!/usr/bin/env python3

"""
Command execution for external tools (git, wget, tar, makeblastdb).

The pipeline never shells out directly; it goes through a CommandExecutor
so tests can substitute a fake one.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

PathLike = Union[str, Path]


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""
    command: List[str]
    returncode: int
    log_path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def read_log(self) -> str:
        """Return the captured log text, or an empty string."""
        if self.log_path is None or not self.log_path.exists():
            return ""
        return self.log_path.read_text(errors='replace')


class CommandExecutor(ABC):
    """Runs an argv list synchronously and reports its exit status."""

    @abstractmethod
    def run(self, command: Sequence[str], log_path: Optional[PathLike] = None,
            cwd: Optional[PathLike] = None) -> CommandResult:
        pass


class SubprocessExecutor(CommandExecutor):
    """Executor backed by subprocess.run."""

    def run(self, command: Sequence[str], log_path: Optional[PathLike] = None,
            cwd: Optional[PathLike] = None) -> CommandResult:
        argv = [str(part) for part in command]
        logging.info(f"Running: {' '.join(argv)}")
        log = Path(log_path) if log_path is not None else None

        try:
            if log is not None:
                with open(log, 'a') as f:
                    completed = subprocess.run(argv, cwd=cwd, stdout=f, stderr=subprocess.STDOUT)
            else:
                completed = subprocess.run(argv, cwd=cwd)
            returncode = completed.returncode
        except FileNotFoundError:
            logging.error(f"Command not found: {argv[0]}")
            returncode = 127

        if returncode != 0:
            logging.debug(f"Command exited with status {returncode}: {' '.join(argv)}")
        return CommandResult(command=argv, returncode=returncode, log_path=log)
