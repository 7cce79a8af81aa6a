#!/usr/bin/env python3

"""
Acquisition of raw source databases.

Each helper produces a local artifact (clone, download, extracted
archive) and reuses an existing one unless a refresh is forced.
"""

import logging
import shutil
from pathlib import Path
from typing import Sequence

from .exceptions import AcquisitionError
from .executor import CommandExecutor, PathLike


class SourceFetcher:
    """Fetch source artifacts through a CommandExecutor."""

    def __init__(self, executor: CommandExecutor, force: bool = False):
        self.executor = executor
        self.force = force

    @staticmethod
    def _remove(dest: Path) -> None:
        if dest.is_dir():
            shutil.rmtree(dest)
        elif dest.exists():
            dest.unlink()

    def _reuse(self, dest: Path) -> bool:
        """True if an existing artifact should be used as is."""
        if not dest.exists():
            return False
        if self.force:
            logging.info(f"Removing existing {dest} (forced refresh)")
            self._remove(dest)
            return False
        logging.info(f"Using existing {dest}")
        return True

    def _run(self, command: Sequence[str], what: str, dest: Path, cwd: PathLike = None) -> None:
        """Run command; on failure remove the partial artifact at dest and raise."""
        result = self.executor.run(command, cwd=cwd)
        if not result.ok:
            if dest.exists():
                logging.warning(f"Removing incomplete {dest}")
                self._remove(dest)
            raise AcquisitionError(f"Failed to {what} (exit status {result.returncode})")

    def git_clone(self, url: str, dest: PathLike) -> Path:
        """Shallow-clone a repository into dest."""
        dest = Path(dest)
        if not self._reuse(dest):
            self._run(['git', 'clone', '--depth', '1', url, str(dest)], f"clone {url}", dest)
        return dest

    def download(self, url: str, dest: PathLike) -> Path:
        """Download a single file to dest."""
        dest = Path(dest)
        if not self._reuse(dest):
            dest.parent.mkdir(parents=True, exist_ok=True)
            self._run(['wget', '-q', '-O', str(dest), url], f"download {url}", dest)
        return dest

    def extract_tar(self, archive: PathLike, dest: PathLike) -> Path:
        """Unpack a tar archive (any compression tar detects) into dest."""
        dest = Path(dest)
        if not self._reuse(dest):
            dest.mkdir(parents=True, exist_ok=True)
            self._run(['tar', '-C', str(dest), '-xf', str(archive)], f"extract {archive}", dest)
        return dest

    def gunzip(self, archive: PathLike) -> Path:
        """Decompress a .gz file next to itself, keeping the archive."""
        archive = Path(archive)
        dest = archive.with_suffix('')
        if not self._reuse(dest):
            self._run(['gzip', '-d', '-k', '-f', str(archive)], f"decompress {archive}", dest)
        return dest

    def run_shell(self, script: str, dest: PathLike) -> Path:
        """Produce dest with a shell pipeline (e.g. NCBI E-utilities)."""
        dest = Path(dest)
        if not self._reuse(dest):
            dest.parent.mkdir(parents=True, exist_ok=True)
            self._run(['bash', '-c', script], f"create {dest}", dest, cwd=dest.parent)
        return dest
