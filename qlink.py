#!/usr/bin/env python3

import argparse
import io
import json
import logging
import sys
import time

from importlib.metadata import PackageNotFoundError, version

from linker.ql_resolver import (
    AlignmentResolver,
    QuoteMatcher,
    ReferenceSyntaxError,
    load_chapters_file,
    parse_quote_reference,
)

__version__ = "0.1.0"


def _lark_version() -> str:
    try:
        return version("lark")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find the original-language tokens of a quote and their aligned translation tokens."
    )
    parser.add_argument(
        "chapters_file", nargs="?", help="Path to original-language chapters (JSON)"
    )
    parser.add_argument("quote", nargs="?", help="Quote to find; separate parts with '&'")
    parser.add_argument(
        "reference", nargs="?", help="Verse range, e.g. '3JN 1:1' or '3JN 1:1-4'"
    )
    parser.add_argument(
        "--occurrence",
        type=int,
        default=1,
        help="Which occurrence of the first quote part to match (default: 1)",
    )
    parser.add_argument(
        "--target",
        action="append",
        default=[],
        metavar="TARGET_FILE",
        help="Aligned translation chapters (JSON); may be given more than once",
    )
    parser.add_argument(
        "--pretty-print",
        action="store_true",
        help="Emit all results in a single pretty-printed JSON document",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument(
        "--show-timing",
        action="store_true",
        help="Show timing information on stderr",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Write output to this file (UTF-8, LF line endings). If omitted, output goes to stdout.",
    )
    return parser


def run(args) -> int:
    logger = logging.getLogger("qlink")

    try:
        reference = parse_quote_reference(args.reference)
    except ReferenceSyntaxError as e:
        sys.stderr.write(f"{e}\n")
        return 2

    start_time = time.time()
    chapters = load_chapters_file(args.chapters_file)
    logger.info("Matching %r in %s", args.quote, args.reference)
    quote_result = QuoteMatcher().find_original_tokens(
        chapters, args.quote, args.occurrence, reference
    )
    match_time = time.time() - start_time

    output = {"quote": quote_result.to_dict(), "alignments": []}
    if quote_result.success:
        resolver = AlignmentResolver()
        for target_file in args.target:
            target_chapters = load_chapters_file(target_file)
            aligned = resolver.find_aligned_tokens(
                quote_result.total_tokens, target_chapters, reference
            )
            entry = aligned.to_dict()
            entry["target"] = target_file
            output["alignments"].append(entry)
    else:
        sys.stderr.write(f"{quote_result.error}\n")

    if args.show_timing:
        sys.stderr.write(f"Quote matching time: {match_time:.3f}s\n")
        sys.stderr.write(f"Overall processing time: {time.time() - start_time:.3f}s\n")

    output_stream = None
    if args.output:
        output_stream = open(args.output, "w", encoding="utf-8", newline="\n")
    else:
        output_stream = sys.stdout

    try:
        if args.pretty_print:
            json.dump(output, output_stream, indent=2, ensure_ascii=False)
            output_stream.write("\n")
        else:
            output_stream.write(json.dumps(output["quote"], ensure_ascii=False))
            output_stream.write("\n")
            for item in output["alignments"]:
                output_stream.write(json.dumps(item, ensure_ascii=False))
                output_stream.write("\n")
    finally:
        if args.output and output_stream is not sys.stdout:
            output_stream.close()

    return 0 if quote_result.success else 1


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print("Version information:")
        print(f"  lark: {_lark_version()}")
        print(f"  qlink: {__version__}")
        return 0

    if not args.chapters_file or args.quote is None or not args.reference:
        parser.error("the following arguments are required: chapters_file, quote, reference")

    logging.basicConfig(
        level=getattr(logging, args.log_level), format="[%(levelname)s] %(message)s"
    )
    return run(args)


if __name__ == "__main__":
    # Ensure UTF-8 encoding for stdout
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8")
    sys.exit(main())
