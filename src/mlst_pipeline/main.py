#!/usr/bin/env python3
"""
Main pipeline module for MLST Pipeline.

This module provides the main entry point and orchestrates the entire pipeline.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
import argparse

from loguru import logger as core_logger

from . import __version__
from .config import PipelineConfig
from .core.parser import AlleleFileParser, STTableParser, ReferenceParser
from .core.profile import ProfileBuilder
from .core.resolver import STResolver
from .exceptions import PipelineError, ConfigurationError
from .models import Locus, RunContext, STProfileTable, STResolution
from .report import ReferenceReport, SummaryWriter


class PropagateHandler(logging.Handler):
    """Forward loguru records to the standard logging handlers."""

    def emit(self, record: logging.LogRecord) -> None:
        logging.getLogger(record.name).handle(record)


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    quiet: bool = False
) -> None:
    """Setup logging configuration."""
    handlers: List[logging.Handler] = []
    if not quiet:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, mode='w'))
    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )

    core_logger.remove()
    core_logger.add(PropagateHandler(), level=log_level.upper(), format="{message}")


def load_typing_scheme(
    config: PipelineConfig,
    context: RunContext
) -> Tuple[List[Locus], STProfileTable]:
    """
    Load the allele catalog and the merged ST profile table.

    Args:
        config: Pipeline configuration
        context: Run context collecting load-time warnings

    Returns:
        Tuple of (loci in configured order, ST profile table)
    """
    loci = [
        AlleleFileParser(allele_file, position).parse()
        for position, allele_file in enumerate(config.allele_files)
    ]
    table = STTableParser(config.st_table_files).parse(context)

    mismatched = [row.st for row in table if len(row.alleles) != len(loci)]
    if mismatched:
        message = (
            f"{len(mismatched)} ST type(s) have a column count different from the "
            f"{len(loci)} configured loci and can never match (first: ST {mismatched[0]})"
        )
        logging.getLogger(__name__).warning(message)
        context.warn(message)
    return loci, table


def process_reference(
    reference_file: Path,
    builder: ProfileBuilder,
    resolver: STResolver,
    config: PipelineConfig,
    context: RunContext,
    summary: Optional[SummaryWriter] = None
) -> STResolution:
    """
    Type a single reference file.

    Args:
        reference_file: Reference FASTA file
        builder: Profile builder for the configured loci
        resolver: ST resolver for the merged table
        config: Pipeline configuration
        context: Run context
        summary: Optional summary collecting one row per reference

    Returns:
        ST resolution for the reference
    """
    log = logging.getLogger(__name__)

    with ReferenceReport(reference_file, config.output_dir, config.output_suffix) as report:
        reference = ReferenceParser(reference_file).parse()
        report.write_reference(reference)

        profile, _ = builder.build_profile(reference.sequence, context, on_match=report.write_locus_match)
        report.write_profile(profile)

        log.info("Looking up ST type identifier...")
        resolution = resolver.resolve(profile, context)
        report.write_resolution(resolution)

    if resolution.assigned_st is not None:
        log.info(f"{reference.identifier}: ST {resolution.assigned_st}")
    elif resolution.matches:
        log.info(f"{reference.identifier}: possible ST types {', '.join(map(str, resolution.st_ids))}")
    else:
        log.info(f"{reference.identifier}: no matching ST type")
    log.info(f"Report written to {report.path}")

    if summary is not None:
        summary.add(reference, resolution)

    return resolution


def run_pipeline(config: PipelineConfig) -> List[STResolution]:
    """
    Run the complete MLST typing pipeline.

    Args:
        config: Pipeline configuration

    Returns:
        One ST resolution per reference file, in configured order
    """
    log = logging.getLogger(__name__)
    context = RunContext()

    log.info(f"Starting MLST Pipeline v{__version__}")
    if config.fast:
        log.info("Using fast evaluation (duplicates are not checked)")

    # Step 1: Load alleles and ST tables
    log.info("Step 1: Loading allele and ST type data...")
    loci, table = load_typing_scheme(config, context)
    log.info(f"Loci: {' '.join(locus.name for locus in loci)}")

    builder = ProfileBuilder(loci, fast=config.fast)
    resolver = STResolver(table, fast=config.fast)
    summary = None
    if config.summary_file is not None:
        summary = SummaryWriter(config.summary_file, [locus.name for locus in loci])

    # Step 2: Type each reference
    log.info("Step 2: Typing reference files...")
    resolutions = []
    for reference_file in config.reference_files:
        resolutions.append(
            process_reference(reference_file, builder, resolver, config, context, summary)
        )

    if summary is not None:
        log.info(f"Summary written to {summary.write()}")

    if context.warning_count > 0:
        log.info(f"There were {context.warning_count} warnings for this run.")
    if context.note_count > 0:
        log.info(f"There were {context.note_count} notes for this run.")
    if config.log_file is not None:
        log.info(f"Log file for this run is in {config.log_file}.")

    log.info("Pipeline completed successfully")
    return resolutions


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for command line interface."""
    parser = argparse.ArgumentParser(
        description="MLST Pipeline - Assign sequence types from exact allele matches"
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        required=True,
        help="Sectioned config file, or YAML config (.yaml/.yml)"
    )

    parser.add_argument(
        "--fast",
        action="store_true",
        help="Stop at the first matching allele of each locus and the first matching ST type"
    )

    parser.add_argument(
        "--quiet",
        action="store_true",
        help="No output to standard out (the log file is still written)"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Produce debug output (same as --log-level DEBUG)"
    )

    parser.add_argument(
        "-l", "--log",
        type=Path,
        default=None,
        help="Program log file (default: mlstar.log)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Directory for report files (default: beside each reference file)"
    )

    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Write a tab-separated summary of all references"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    args = parser.parse_args(argv)

    try:
        config = PipelineConfig.from_args(vars(args))
    except ConfigurationError as e:
        setup_logging("INFO")
        logging.error(str(e))
        sys.exit(2)

    # Setup logging
    setup_logging(config.log_level, config.log_file, config.quiet)

    try:
        run_pipeline(config)
    except PipelineError as e:
        logging.error(f"*** ERROR: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logging.info("Pipeline interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
