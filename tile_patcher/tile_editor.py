#!/usr/bin/env python3
"""
Tile editor - apply a tile edit script to SNES tile tables

Usage:
    python -m tile_patcher <script> [options]

Options:
    --log-level <level>  Logging level (default: INFO)
    --log-file <file>    Also write the log to this file
    --dry-run            Parse the script and list the copies without writing
"""

import argparse
import sys
from typing import List, Optional

from .edit_script import EditScript
from .exceptions import TilePatcherError
from .logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tile-patcher',
        description='Copy 4bpp tiles between tile tables and grayscale rasters')
    parser.add_argument('script', help='Edit script to apply')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Logging level (default: INFO)')
    parser.add_argument('--log-file', help='Also write the log to this file')
    parser.add_argument('--dry-run', action='store_true',
                        help='List the planned tile copies without writing anything')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logging(args.log_level, args.log_file)

    try:
        script = EditScript.load(args.script)

        if args.dry_run:
            for directive in script:
                for src_idx, dst_idx in directive.copies():
                    print(f"{directive.source}:0x{src_idx:X} -> "
                          f"{directive.destination}:0x{dst_idx:X}")
            print(f"Dry run: {len(script)} directive(s), nothing written")
            return 0

        script.apply()
    except TilePatcherError as e:
        logger.error(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
