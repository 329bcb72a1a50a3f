#!/usr/bin/env python3
"""
Word count driver.
Runs a word count job over an input path and writes (word,count) part files.
"""

import sys
import time
import logging
import argparse

from common.config import JobConfig, DEFAULT_APP_NAME, setup_logging
from coordinator.job_manager import JobManager

logger = logging.getLogger(__name__)

USAGE = "Usage: wordcount <input-path> <output-path>"
BANNER = "=" * 40


class DriverArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on invalid arguments"""

    def error(self, message):
        print(f"{self.prog}: error: {message}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        sys.exit(1)


def build_parser():
    parser = DriverArgumentParser(
        prog="wordcount",
        description="Count word occurrences in text files"
    )
    parser.add_argument("input", nargs="?", help="Input file, directory, glob, or comma-separated list")
    parser.add_argument("output", nargs="?", help="Output directory (must not exist)")
    parser.add_argument("--job-file", help="Python file with map/reduce functions (default: built-in word count)")
    parser.add_argument("--num-map-tasks", type=int, help="Number of input splits (default: 2)")
    parser.add_argument("--num-reduce-tasks", type=int, help="Number of output partitions (default: number of map tasks)")
    parser.add_argument("--no-combiner", dest="use_combiner", action="store_false", default=None,
                        help="Disable map-side combining")
    parser.add_argument("--parallelism", type=int, help="Worker threads for map and reduce tasks (default: 4)")
    parser.add_argument("--overwrite", action="store_true", help="Replace an existing output directory")
    parser.add_argument("--metrics-file", help="Write job metrics as JSON to this file")
    parser.add_argument("--app-name", default=DEFAULT_APP_NAME, help="Application name used in logs and metrics")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    return parser


def run(args) -> int:
    """Run the job described by parsed arguments and return the exit status."""
    try:
        config = JobConfig.from_env(
            args.input,
            args.output,
            app_name=args.app_name,
            job_file=args.job_file,
            num_map_tasks=args.num_map_tasks,
            num_reduce_tasks=args.num_reduce_tasks,
            use_combiner=args.use_combiner,
            parallelism=args.parallelism,
            overwrite=args.overwrite,
            metrics_file=args.metrics_file,
            log_level=args.log_level
        )
        config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_level)

    start_time = time.time()
    try:
        JobManager().run_job(config)
    except (OSError, RuntimeError, ValueError, AttributeError, ImportError) as e:
        logger.error(f"Job failed for input {config.input_path}: {e}")
        return 1
    execution_time = int((time.time() - start_time) * 1000)

    print(BANNER)
    print(f"Job completed for input: {config.input_path}")
    print(f"Total execution time: {execution_time} ms")
    print(BANNER)
    return 0


def main(argv=None) -> int:
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as e:
        return e.code

    if not args.input or not args.output:
        print(USAGE, file=sys.stderr)
        return 1

    return run(args)


if __name__ == '__main__':
    sys.exit(main())
