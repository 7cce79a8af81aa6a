#!/usr/bin/env python3

"""
Main pipeline class for building a normalized sequence database.

Coordinates acquisition, adapter parsing, validation, deduplication,
output and indexing for one source database.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Type

from .acquisition import SourceFetcher
from .config import PipelineConfig
from .data_structures import Record
from .exceptions import PipelineError, ConfigurationError
from .executor import CommandExecutor, SubprocessExecutor
from .indexing import BlastIndexer
from .parsers import FastaWriter
from .processors import OrfValidator, SequenceDeduplicator
from ..adapters.base import ADAPTER_REGISTRY, SourceAdapter, get_adapter
from ..utils.performance_monitor import PerformanceMonitor


class DatabaseBuildPipeline:
    """Main pipeline class that coordinates all build stages."""

    def __init__(self, config: PipelineConfig,
                 executor: Optional[CommandExecutor] = None,
                 registry: Optional[Dict[str, Type[SourceAdapter]]] = None):
        self.config = config
        self.executor = executor or SubprocessExecutor()
        self.registry = ADAPTER_REGISTRY if registry is None else registry
        self.monitor = PerformanceMonitor(
            memory_limit_mb=config.memory_limit_mb,
            enabled=config.enable_memory_monitoring
        )
        self.validator = OrfValidator()
        self.deduplicator = SequenceDeduplicator()
        self.stats: Dict[str, int] = {}

    @property
    def database_dir(self) -> Path:
        return Path(self.config.output_dir) / self.config.database

    def run(self) -> bool:
        """
        Run the complete build.

        Returns:
            True if the database was written and indexed
        """
        try:
            self.build()
            logging.info("Pipeline completed successfully")
            return True
        except PipelineError as e:
            logging.error(f"Pipeline failed: {e}")
            logging.debug("Full traceback:", exc_info=True)
            return False

    def build(self) -> Path:
        """Build and index the database; returns the sequences file path."""
        adapter = get_adapter(self.config.database, self.registry)

        output_parent = Path(self.config.output_dir)
        if not self.config.output_dir or not output_parent.is_dir():
            raise ConfigurationError(f"Output directory does not exist: {self.config.output_dir}")

        db_dir = self.database_dir
        db_dir.mkdir(exist_ok=True)
        file_handler = self._setup_pipeline_logging(db_dir)

        try:
            logging.info(f"Building database '{adapter.name}': {adapter.description}")
            logging.info(f"Configuration: {self.config}")

            with self.monitor.stage_context("acquisition"):
                workdir = db_dir / "src"
                workdir.mkdir(exist_ok=True)
                fetcher = SourceFetcher(self.executor, force=self.config.force)
                source = adapter.acquire(fetcher, workdir)

            records = self.normalize(adapter, source)

            sequences = db_dir / "sequences"
            with self.monitor.stage_context("output") as metrics:
                writer = FastaWriter(adapter.name, self.config.id_separator, self.config.line_width)
                metrics.records_processed = writer.save(records, sequences)
                self.stats['written'] = metrics.records_processed

            with self.monitor.stage_context("indexing"):
                indexer = BlastIndexer(self.executor, self.config.index_program)
                indexer.build(sequences, adapter.name, adapter.seq_type, db_dir / "makeblastdb.log")

            if self.config.generate_reports:
                self._generate_report(adapter, db_dir)
            self.monitor.log_performance_report()
            logging.info(f"Database '{adapter.name}' ready: {sequences} ({self.stats['written']} sequences)")
            return sequences
        finally:
            logging.getLogger().removeHandler(file_handler)
            file_handler.close()

    def normalize(self, adapter: SourceAdapter, source: Path) -> List[Record]:
        """Load records through the adapter, validate, deduplicate and sort them."""
        with self.monitor.stage_context("parsing") as metrics:
            records = adapter.load(source)
            metrics.records_processed = len(records)
            self.stats['loaded'] = len(records)

        with self.monitor.stage_context("validation") as metrics:
            # Advisory: failures are logged but the records are kept
            for record in records:
                self.validator.check(record)
            metrics.records_processed = len(records)
            summary = self.validator.get_summary()
            self.stats['rejected'] = summary['rejected']
            self.stats['repaired'] = summary['repaired']
            logging.info(f"Checked {summary['checked']} genes: {summary['rejected']} failed, "
                         f"{summary['repaired']} repaired by reverse complement")

        with self.monitor.stage_context("deduplication") as metrics:
            records = self.deduplicator.deduplicate(records)
            metrics.records_processed = len(records)
            self.stats['duplicates'] = self.stats['loaded'] - len(records)

        return sorted(records, key=lambda r: r.id)

    def _setup_pipeline_logging(self, db_dir: Path) -> logging.Handler:
        """Add a build log file handler to the root logger."""
        file_handler = logging.FileHandler(db_dir / 'build.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s'
        ))

        root_logger = logging.getLogger()
        root_logger.addHandler(file_handler)

        if self.config.debug_mode:
            root_logger.setLevel(logging.DEBUG)
        return file_handler

    def _generate_report(self, adapter: SourceAdapter, db_dir: Path) -> None:
        """Write a plain text summary of the build."""
        report_file = db_dir / 'build_report.txt'
        performance = self.monitor.get_performance_summary()

        with open(report_file, 'w') as f:
            f.write("Sequence Database Build - Report\n")
            f.write("=" * 50 + "\n\n")

            f.write("SOURCE\n")
            f.write("-" * 20 + "\n")
            f.write(f"Database: {adapter.name}\n")
            f.write(f"Description: {adapter.description}\n")
            f.write(f"Molecule type: {adapter.seq_type.value}\n\n")

            f.write("RECORDS\n")
            f.write("-" * 20 + "\n")
            f.write(f"Loaded: {self.stats.get('loaded', 0):,}\n")
            f.write(f"Failed full-gene check: {self.stats.get('rejected', 0):,}\n")
            f.write(f"Repaired by reverse complement: {self.stats.get('repaired', 0):,}\n")
            f.write(f"Duplicate sequences removed: {self.stats.get('duplicates', 0):,}\n")
            f.write(f"Written: {self.stats.get('written', 0):,}\n\n")

            f.write("STAGES\n")
            f.write("-" * 20 + "\n")
            for stage_name, stage in performance['stages'].items():
                f.write(f"{stage_name}: {stage['elapsed_time']:.2f}s ")
                f.write(f"({stage['records_processed']} records)\n")

        logging.info(f"Generated build report: {report_file}")
