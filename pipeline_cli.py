#!/usr/bin/env python3

"""
Command-line interface for the sequence database pipeline.

Downloads one public resistance/virulence/plasmid database, normalizes it
and formats it as a BLAST database under the chosen directory.
"""

import argparse
import sys
import logging

from seqdb_pipeline import DatabaseBuildPipeline, available_sources, get_adapter
from seqdb_pipeline.core.config import load_config
from seqdb_pipeline.core.exceptions import PipelineError, UnknownSourceError


def setup_logging(debug: bool = False) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Download and normalize a sequence database for gene screening",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List the databases that can be built
  seqdb-build --list

  # Build ResFinder under ./db
  seqdb-build --db resfinder --dbdir db

  # Re-download CARD even if a copy exists
  seqdb-build --db card --dbdir db --force
        """
    )

    parser.add_argument(
        '--db',
        help='Database to build (see --list)'
    )
    parser.add_argument(
        '--dbdir',
        help='Parent directory for databases (must exist)'
    )
    parser.add_argument(
        '--force',
        action='store_true',
        default=None,
        help='Re-download the source even if a local copy exists'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        default=None,
        help='Verbose debug output'
    )
    parser.add_argument(
        '--config',
        help='Configuration file (JSON or YAML)'
    )
    parser.add_argument(
        '--list',
        action='store_true',
        help='List available databases and exit'
    )

    return parser


def list_sources() -> None:
    for name in available_sources():
        print(f"{name}\t{get_adapter(name).description}")


def main(argv=None):
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(bool(args.debug))
    logger = logging.getLogger(__name__)

    if args.list:
        list_sources()
        return 0

    try:
        config = load_config(
            config_path=args.config,
            use_env=True,
            database=args.db,
            output_dir=args.dbdir,
            force=args.force,
            debug_mode=args.debug
        )

        if not config.database:
            raise UnknownSourceError("", available_sources())

        logger.info(f"Database: {config.database}")
        logger.info(f"Output directory: {config.output_dir}")

        pipeline = DatabaseBuildPipeline(config)
        pipeline.build()
        logger.info("Done.")
        return 0

    except PipelineError as e:
        logger.error(f"{e}")
        return 1
    except OSError as e:
        logger.error(f"File error: {e}")
        logger.debug("Full traceback:", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
