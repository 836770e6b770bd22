#!/usr/bin/env python3
"""
MSIX packaging command line.

Usage:
    msixbuild [--config msix_config.json] [--package-name NAME] [--verbose] [--log-dir DIR]

Signing secrets can be supplied through the environment instead of the
configuration file:
    MSIX_SIGN_PFX_BASE64     Base64-encoded PFX file
    MSIX_SIGN_PFX_PASSWORD   PFX password
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from msixbuild.LoggingSetup import setup_logging
from msixbuild.PackagingConfig import DEFAULT_CONFIG_NAME, load_config
from msixbuild.PackagingPipeline import PackagingPipeline
from msixbuild.errors import MsixBuildError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="msixbuild",
        description="Package a prebuilt desktop application directory into an MSIX package",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  msixbuild
  msixbuild --config packaging/msix_config.json
  msixbuild --package-name Mines --verbose --log-dir build/logs
        """
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=Path(DEFAULT_CONFIG_NAME),
        help=f"Build configuration file (default: {DEFAULT_CONFIG_NAME})"
    )

    parser.add_argument(
        "--package-name",
        help="Name of the prebuilt application folder (overrides the configuration)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--log-dir",
        type=Path,
        help="Also write a rotating log file into this directory"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for MSIX packaging."""
    args = build_parser().parse_args(argv)

    setup_logging(args.log_dir, verbose=args.verbose)

    try:
        config = load_config(args.config)
        if args.package_name:
            config.package_name = args.package_name

        result = PackagingPipeline(config).run()

    except MsixBuildError as e:
        logger.error(f"ERROR: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
        return 130

    if result.packaged:
        state = "signed" if result.signed else "unsigned"
        logger.info(f"Package ({state}): {result.layout.output_package_file}")
    else:
        logger.info(f"Manifest and resources prepared in {result.layout.app_directory}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
