#!/usr/bin/env python3
"""
levelcode CLI - Export, validate and share level files.

Usage:
    levelcode export record.json --output level.json
    levelcode validate level.json
    levelcode encode level.json
    levelcode decode <code> --output level.json
    levelcode info level.json
"""

import argparse
import json
import logging
import sys
from collections import Counter
from pathlib import Path


def _print_issues(result):
    print("✗ Validation failed:")
    for issue in result.errors:
        print(f"  - {issue}")


def cmd_export(args):
    """Export an editor record (or canonical document) to a canonical file."""
    from levelcode.document import InternalRecord, LevelDocument
    from levelcode.files import save_level_file

    try:
        data = json.loads(Path(args.input).read_text(encoding="utf-8"))
        if args.source == "record":
            source = InternalRecord.from_dict(data)
        else:
            source = LevelDocument.from_dict(data)
        output = args.output or f"{Path(args.input).stem}.level.json"
        path = save_level_file(source, output)
        print(f"Exported to: {path}")
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_validate(args):
    """Fully validate a canonical level file."""
    from levelcode.files import load_level_file

    try:
        result = load_level_file(args.level_file)
        if result.ok:
            print("✓ Level is valid")
            return 0
        _print_issues(result)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_encode(args):
    """Print the shareable code for a level file."""
    from levelcode.codec import encode_for_sharing
    from levelcode.files import load_level_file

    try:
        result = load_level_file(args.level_file)
        if not result.ok:
            _print_issues(result)
            return 1
        shared = encode_for_sharing(result.document, budget=args.budget)
        if shared.warning:
            print(f"Warning: {shared.warning}", file=sys.stderr)
        print(shared.code)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_decode(args):
    """Decode a shareable code to canonical JSON."""
    from levelcode.files import save_level_file
    from levelcode.importer import import_code
    from levelcode.transcoder import serialize

    try:
        result = import_code(args.code)
        if not result.ok:
            _print_issues(result)
            return 1
        if args.output:
            path = save_level_file(result.document, args.output)
            print(f"Decoded to: {path}")
        else:
            print(serialize(result.document))
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_info(args):
    """Show information about a level file."""
    from levelcode.codec import code_size, encode
    from levelcode.files import load_level_file
    from levelcode.schema import occupancy

    try:
        result = load_level_file(args.level_file)
        if not result.ok:
            _print_issues(result)
            return 1
        doc = result.document

        print(f"Level: {doc.name} ({doc.id})")
        print(f"Format version: {doc.format_version}")
        if doc.author:
            print(f"Author: {doc.author}")
        if doc.metadata.difficulty:
            print(f"Difficulty: {doc.metadata.difficulty}")
        if doc.metadata.tags:
            print(f"Tags: {', '.join(doc.metadata.tags)}")

        cells = occupancy(doc)
        print(f"\nGrid: {doc.grid.width} x {doc.grid.height}")
        print(f"Blocks: {len(doc.grid.blocks)} ({cells.mean() * 100:.1f}% filled)")
        for block_type, count in sorted(Counter(b.type for b in doc.grid.blocks).items()):
            print(f"  {block_type}: {count}")

        print(f"\nShare code: {code_size(encode(doc))} bytes")
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main(argv=None):
    from levelcode.config import Config

    parser = argparse.ArgumentParser(
        description="levelcode - Export, validate and share level files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  levelcode export record.json --output level.json
  levelcode validate level.json
  levelcode encode level.json
  levelcode decode 1x3k9a.eJyrVsp... --output level.json
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # export
    export_parser = subparsers.add_parser(
        "export",
        help="Export an editor record to canonical JSON",
    )
    export_parser.add_argument("input", help="Input JSON file")
    export_parser.add_argument("--output", "-o", help="Output level file")
    export_parser.add_argument(
        "--source", choices=["record", "document"], default="record",
        help="Shape of the input file (default: record)",
    )
    export_parser.set_defaults(func=cmd_export)

    # validate
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a canonical level file",
    )
    validate_parser.add_argument("level_file", help="Path to level JSON")
    validate_parser.set_defaults(func=cmd_validate)

    # encode
    encode_parser = subparsers.add_parser(
        "encode",
        help="Print the shareable code for a level",
    )
    encode_parser.add_argument("level_file", help="Path to level JSON")
    encode_parser.add_argument(
        "--budget", type=int, default=Config.SHARE_BUDGET_BYTES,
        help=f"Size budget in bytes (default: {Config.SHARE_BUDGET_BYTES})",
    )
    encode_parser.set_defaults(func=cmd_encode)

    # decode
    decode_parser = subparsers.add_parser(
        "decode",
        help="Decode a shareable code",
    )
    decode_parser.add_argument("code", help="Shareable level code")
    decode_parser.add_argument("--output", "-o", help="Write the level to this file")
    decode_parser.set_defaults(func=cmd_decode)

    # info
    info_parser = subparsers.add_parser(
        "info",
        help="Show information about a level file",
    )
    info_parser.add_argument("level_file", help="Path to level JSON")
    info_parser.set_defaults(func=cmd_info)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
