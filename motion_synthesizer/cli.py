"""
Command-line interface for the motion synthesizer.

Usage:
    motion-synthesizer tracker.csv reference.csv [--output OUTPUT] [--config CONFIG]
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from .config import SynthesizerConfig
from .driver import SynthesizerInputError, synthesize_files

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_INTERNAL_ERROR = 3

USAGE_MESSAGE = (
    "Must pass the CSV file containing the tracker reports, then the CSV file "
    "containing other data that you'd like to interpolate the tracker based on."
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='motion-synthesizer',
        description='Interpolate tracker poses at the timestamps of another CSV file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
    # Write outData.csv in the current directory
    motion-synthesizer tracker.csv reference.csv

    # Custom output file
    motion-synthesizer tracker.csv reference.csv -o synthesized.csv

    # Settings from a YAML file, verbose output
    motion-synthesizer tracker.csv reference.csv -c synth.yaml -v
'''
    )

    parser.add_argument(
        'tracker',
        type=str,
        help='CSV file of tracker reports (sec,usec,x,y,z,qw,qx,qy,qz)'
    )

    parser.add_argument(
        'reference',
        type=str,
        help='CSV file whose sec,usec timestamps the tracker is interpolated at'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        default=None,
        help='Output CSV file (default: outData.csv, or output_path from the config)'
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        default=None,
        help='Path to YAML configuration file'
    )

    parser.add_argument(
        '--summary-json',
        type=str,
        default=None,
        help='Also write the processing summary to this JSON file'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    return parser


def print_usage_error(message: str) -> int:
    """Report a setup problem and the usage message on stderr."""
    print(message, file=sys.stderr)
    print("", file=sys.stderr)
    print(USAGE_MESSAGE, file=sys.stderr)
    return EXIT_USAGE


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        if e.code == 0:
            # --help
            return EXIT_OK
        print(USAGE_MESSAGE, file=sys.stderr)
        return EXIT_USAGE

    # Setup logging
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = SynthesizerConfig.from_yaml(args.config) if args.config else SynthesizerConfig()
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        return print_usage_error(f"Configuration error: {e}")

    try:
        summary = synthesize_files(args.tracker, args.reference, args.output, config)
    except FileNotFoundError as e:
        return print_usage_error(str(e))
    except SynthesizerInputError as e:
        return print_usage_error(str(e))
    except Exception as e:
        logger.exception(f"Got exception: {e}")
        return EXIT_INTERNAL_ERROR

    if args.summary_json:
        summary.save_json(args.summary_json)

    if not summary.ok:
        logger.warning(f"{summary.unexpected} rows hit an unexpected interpolation failure")

    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
