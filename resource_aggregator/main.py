from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from .engine import AggregateFunctor, AggregationConfig, Context, pipe_process

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    context = Context(path=Path.cwd())
    config = AggregationConfig(
        output_file=Path(args.output),
        prepended_file=Path(args.prepend) if args.prepend else None,
        with_delimiters=args.delimiters,
        remove_included=args.remove_included,
    )
    functor = AggregateFunctor("aggregate", config, encoding=args.encoding)

    logger.debug("Aggregating %d files into %s", len(args.inputs), args.output)
    result = pipe_process([functor], context, {"input_files": list(args.inputs)})

    print(json.dumps(result, indent=2))
    if not result.get("is_success"):
        return 1

    logger.info(
        "Size of original resources: %d bytes, aggregated: %d bytes",
        context.sizes.original,
        context.sizes.aggregated,
    )
    return 0


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Aggregate CSS/JavaScript files into one file.")
    parser.add_argument("output", type=str, help="Path of the aggregated output file.")
    parser.add_argument("inputs", nargs="*", help="Input files, in concatenation order.")
    parser.add_argument(
        "--prepend",
        type=str,
        default=None,
        help="File written before all inputs, followed by a line break.",
    )
    parser.add_argument(
        "--encoding",
        type=str,
        default="utf-8",
        help="Encoding used to read inputs and write the output.",
    )
    parser.add_argument(
        "--delimiters",
        action="store_true",
        help="Insert ';' between concatenated fragments.",
    )
    parser.add_argument(
        "--remove-included",
        action="store_true",
        help="Delete the input files after a successful aggregation.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    args = parser.parse_args(argv)
    if not args.inputs and not args.prepend:
        parser.error("at least one input file or --prepend is required")
    return args


if __name__ == "__main__":
    raise SystemExit(main())
