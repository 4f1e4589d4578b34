"""Concatenate any number of random forest model files into one model."""
import os
import sys
import argparse
from typing import List, Optional

from dotenv import load_dotenv

from forest_module.combiner import CombineError, plan_combination, write_combined
from forest_module.logger import configure_logging, get_child_logger
from forest_module.model_file import ModelFileError
from forest_module.settings import Settings

log = get_child_logger("main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="combine-models",
        description="Concatenate forest model files; the header of the first file is kept "
                    "with its 'trees:' count set to the total across all inputs.",
    )
    parser.add_argument("models", nargs="+", metavar="MODEL", help="Model files, combined in the order given")
    parser.add_argument("-o", "--output", help="Write the combined model here instead of stdout")
    parser.add_argument("--no-echo", action="store_true", help="Do not echo the rewritten header to stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    settings = Settings.from_env()
    configure_logging(settings)

    args = build_parser().parse_args(argv)
    echo = None if (args.no_echo or not settings.echo_header) else sys.stderr

    try:
        result = plan_combination(args.models)
    except (ModelFileError, CombineError) as e:
        log.critical(str(e))
        return 1

    # the output file is only created once every input has been validated
    try:
        if args.output:
            with open(args.output, "wb") as out:
                write_combined(result, out, echo=echo)
        else:
            sys.stdout.flush()
            write_combined(result, sys.stdout.buffer, echo=echo)
    except ModelFileError as e:
        log.critical(str(e))
        if args.output and os.path.exists(args.output):
            os.remove(args.output)
        return 1

    log.info("Wrote {} trees from {} files to {}", result.trees, len(result.inputs), args.output or "stdout")
    return 0


def run() -> None:
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        log.critical(f"Unhandled exception: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
