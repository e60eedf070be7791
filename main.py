#!/usr/bin/env python3
"""
Main entry point for the L1 MC comparison.

Compares an older ("2018") and a newer ("2022") Monte Carlo sample of
L1 trigger ntuples: energy sums, calo-tower region sums and the eta/phi
profile of tower energy, each normalized per event and overlaid.

Writes three PDF documents plus a JSON summary to the output directory
(the working directory by default).
"""

import sys
import os
import logging
import argparse
import yaml

from domain.config import ComparisonConfig
from pipeline.executor import PipelineExecutor


DEFAULT_CONFIG_PATH = "config.yaml"


class UsageError(Exception):
    """Wrong command-line usage."""


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors on stdout with exit code 1."""

    def error(self, message):
        self.print_usage(sys.stdout)
        print(f"ERROR: {message}", file=sys.stdout)
        print("Please pass two paths: the old (2018) MC and the new (2022) MC directories.", file=sys.stdout)
        raise UsageError(message)


def setup_logging(level: str = "INFO"):
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def load_config(config_path: str, required: bool = True) -> dict:
    """
    Load configuration from YAML file.

    A missing optional file yields an empty dict (built-in defaults).
    """
    if not required and not os.path.exists(config_path):
        return {}
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = _ArgumentParser(
        description="Compare two L1 trigger MC samples (energy sums and calo towers)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compare two samples, writing the PDFs to the working directory
  python main.py /data/mc2018/ /data/mc2022/

  # Custom config and verbose logging
  python main.py /data/mc2018/ /data/mc2022/ --config my_config.yaml --log-level DEBUG
        """
    )

    parser.add_argument("old_dir", help="Root directory of the old (2018) MC sample")
    parser.add_argument("new_dir", help="Root directory of the new (2022) MC sample")
    parser.add_argument(
        "--config", type=str, default=None,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH} if present)"
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )

    return parser.parse_args(argv)


def build_config(args) -> ComparisonConfig:
    """Load YAML config and inject the two dataset directories."""
    if args.config is None:
        config_dict = load_config(DEFAULT_CONFIG_PATH, required=False)
    else:
        config_dict = load_config(args.config)

    # Positional directories override YAML values
    datasets = config_dict.setdefault("datasets", {})
    datasets.setdefault("old", {})["input_dir"] = args.old_dir
    datasets.setdefault("new", {})["input_dir"] = args.new_dir

    return ComparisonConfig.from_dict(config_dict)


def main(argv=None, renderer=None) -> int:
    """Main entry point."""
    try:
        args = parse_args(argv)
    except UsageError:
        return 1

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("L1 MC Comparison")
    logger.info("=" * 60)

    try:
        logger.info(f"Loading configuration from: {args.config or DEFAULT_CONFIG_PATH}")
        config = build_config(args)
        logger.info("Configuration loaded and validated successfully")

        executor = PipelineExecutor(config, renderer=renderer)
        final_context = executor.run()

        if final_context.is_successful:
            logger.info("✓ Comparison completed successfully")
            return 0
        else:
            logger.error(f"✗ Comparison failed: {final_context.error_message}")
            return 1

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
