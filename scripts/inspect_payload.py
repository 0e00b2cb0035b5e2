#!/usr/bin/env python3
"""Inspect, convert or preview a Tree/FeedTree payload file.

Usage:
    python inspect_payload.py out/run_42.msg
    python inspect_payload.py out/run_42.msg --convert out/run_42.json
    python inspect_payload.py out/snapshots.jsonc --feedtree --import mysim.types
    python inspect_payload.py out/run_42.msg --preview out/run_42.png

The script:
1. Imports any modules given with --import so their Serializable types register
2. Reads the payload, picking the format from the extension
3. Prints a summary of fields and series
4. Optionally re-writes it in another format and/or renders a PNG preview
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path

# Add src to path for imports
SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
SRC_DIR = PROJECT_ROOT / "src"
sys.path.insert(0, str(SRC_DIR))

from analysis.preview import PreviewGenerator
from analysis.report import print_summary
from codec.files import read_feedtree, read_tree, write
from config import CodecConfig, Config, DEFAULT_CONFIG
from errors import CalcifyError

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Inspect, convert or preview a Tree/FeedTree payload"
    )
    parser.add_argument("path", help="Payload file (.json, .jsonc or .msg)")
    parser.add_argument(
        "--feedtree",
        action="store_true",
        help="Read the payload as a FeedTree instead of a Tree",
    )
    parser.add_argument(
        "--format",
        choices=["json", "jsonc", "msg"],
        help="Payload format, if the extension does not say",
    )
    parser.add_argument(
        "--import",
        dest="imports",
        nargs="+",
        default=[],
        help="Modules to import first so custom element types are registered",
    )
    parser.add_argument(
        "--convert",
        help="Write the payload to this path (format from its extension)",
    )
    parser.add_argument(
        "--indent",
        type=int,
        help="Pretty-print indent for --convert to .json",
    )
    parser.add_argument(
        "--preview",
        help="Render a PNG preview of Bin/Point/numeric series to this path",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print the summary",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S'
    )

    for module in args.imports:
        importlib.import_module(module)

    try:
        if args.feedtree:
            container = read_feedtree(args.path, fmt=args.format)
        else:
            container = read_tree(args.path, fmt=args.format)
    except (CalcifyError, OSError, ValueError) as e:
        logger.error(f"Could not read {args.path}: {e}")
        return 1

    if not args.quiet:
        print_summary(container)

    if args.convert:
        config = Config(
            codec=CodecConfig(json_indent=args.indent),
            output=DEFAULT_CONFIG.output,
            preview=DEFAULT_CONFIG.preview,
        )
        try:
            write(container, args.convert, config=config)
        except (CalcifyError, OSError, ValueError) as e:
            logger.error(f"Could not write {args.convert}: {e}")
            return 1

    if args.preview:
        generator = PreviewGenerator(container, DEFAULT_CONFIG.preview)
        if not generator.generate_to_file(args.preview):
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
