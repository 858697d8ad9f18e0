#!/usr/bin/env python3
"""
Command line interface for the Reactome gene set export.
"""

import argparse
import logging
import sys

from .config import DEFAULT_CONFIG_PATH, ExportConfig, generate_default_config
from .exceptions import ExportError
from .pipeline import GeneSetExportPipeline
from .utils import setup_logging


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Export Reactome pathways as an MSigDB-GSEA gene set file"
    )

    parser.add_argument(
        "-c", "--config-file-path",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to TOML configuration file (default: {DEFAULT_CONFIG_PATH})"
    )
    parser.add_argument(
        "-g", "--generate-config-file",
        action="store_true",
        help="Write a default configuration file to the configuration path and exit"
    )

    output_group = parser.add_argument_group("Output configuration overrides")
    output_group.add_argument(
        "--output-dir",
        type=str,
        help="Override output directory"
    )
    output_group.add_argument(
        "--log-dir",
        type=str,
        help="Also write the log to export.log in this directory"
    )
    output_group.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    return parser.parse_args(argv)


def update_config(config: ExportConfig, args: argparse.Namespace) -> ExportConfig:
    """Update configuration with command line overrides."""
    if args.output_dir:
        config.config['output']['directory'] = args.output_dir
    return config


def main(argv=None):
    """Main entry point for the CLI."""
    args = parse_args(argv)

    try:
        setup_logging(args.log_dir, level=logging.DEBUG if args.verbose else logging.INFO)

        if args.generate_config_file:
            config_path = generate_default_config(args.config_file_path)
            logging.info(f"Wrote default configuration to {config_path}")
            return

        logging.info(f"Using configuration file: {args.config_file_path}")
        config = update_config(ExportConfig(args.config_file_path), args)

        output_file = GeneSetExportPipeline(config).run()
        logging.info(f"Gene set export written to {output_file}")
    except (ExportError, OSError) as e:
        logging.error(f"Gene set export failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
