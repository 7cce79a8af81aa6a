#!/usr/bin/env python3

"""
Custom exceptions for the sequence database pipeline.

Every condition that must abort a build is raised as a subclass of
PipelineError; recoverable problems are only logged as warnings.
"""

from typing import Iterable


class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""
    pass


class ParseError(PipelineError):
    """Error occurred during file parsing."""

    def __init__(self, message: str, filename: str = "", line_number: int = 0):
        super().__init__(message)
        self.filename = filename
        self.line_number = line_number

    def __str__(self):
        if self.filename and self.line_number:
            return f"Parse error in {self.filename} at line {self.line_number}: {super().__str__()}"
        elif self.filename:
            return f"Parse error in {self.filename}: {super().__str__()}"
        return super().__str__()


class AdapterError(PipelineError):
    """A source adapter could not interpret a record of its database."""

    def __init__(self, message: str, source: str = "", record_id: str = ""):
        super().__init__(message)
        self.source = source
        self.record_id = record_id

    def __str__(self):
        if self.source and self.record_id:
            return f"{self.source} record {self.record_id!r}: {super().__str__()}"
        elif self.source:
            return f"{self.source}: {super().__str__()}"
        return super().__str__()


class UnknownSourceError(PipelineError):
    """Requested database name is not in the adapter registry."""

    def __init__(self, name: str, valid_names: Iterable[str]):
        self.name = name
        self.valid_names = sorted(valid_names)
        super().__init__(
            f"Unknown database '{name}'. Valid options: {', '.join(self.valid_names)}"
        )


class ConfigurationError(PipelineError):
    """Error in pipeline configuration."""
    pass


class AcquisitionError(PipelineError):
    """Fetching or unpacking a source database failed."""
    pass


class IndexingError(PipelineError):
    """The external indexing tool reported failure."""

    def __init__(self, message: str, log_text: str = ""):
        super().__init__(message)
        self.log_text = log_text

    def __str__(self):
        if self.log_text:
            return f"{super().__str__()}\n{self.log_text.rstrip()}"
        return super().__str__()


class MemoryLimitError(PipelineError):
    """Memory usage exceeded limits."""

    def __init__(self, message: str, current_usage: float, limit: float):
        super().__init__(message)
        self.current_usage = current_usage
        self.limit = limit

    def __str__(self):
        return f"Memory error: {super().__str__()} (current: {self.current_usage:.1f}MB, limit: {self.limit:.1f}MB)"
