"""Command-line entry point for linefinder."""

import argparse
import logging
from typing import List, Optional

from .config.parser import load_settings
from .engine import LineSearchEngine, configure
from .exceptions import LineFinderError


logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return number


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="linefinder",
        description="Find lines or csv fields containing a term, ignoring case.",
    )
    p.add_argument("term", help="Text to search for")
    p.add_argument("input", help="Input file (.txt or .csv)")
    p.add_argument("--output", "-o", default="", help="Write matches to this file instead of the console")
    p.add_argument("--config", "-c", default=None, help="Settings file (YAML)")
    p.add_argument(
        "--max-workers",
        "-j",
        type=_positive_int,
        default=None,
        help="Cap on worker threads (default: one thread per record)",
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = configure(args.term, args.input, args.output)
        result = load_settings(args.config)
        settings = result.settings
        if args.max_workers is not None:
            settings = settings.model_copy(update={"max_workers": args.max_workers})

        # Settings warnings are recomputed once the command-line overrides apply.
        file_warnings = result.settings.validate_settings()
        for warning in result.warnings:
            if warning not in file_warnings:
                logger.debug(warning)
        for warning in settings.validate_settings():
            logger.warning(warning)

        LineSearchEngine(config, settings=settings).run()
    except LineFinderError as e:
        logger.error(str(e))
        return EXIT_ERROR

    return EXIT_SUCCESS
