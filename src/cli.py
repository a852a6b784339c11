import argparse
import logging
import sys

from pydantic import ValidationError

from config import Config, configure_logging
from InputParser import ParserError, parse_input
from ScheduleProcessor import FileOutputSink, ProcessorError, ScheduleProcessor
from TimestampOrdering import DataItemRegistry, TimestampOrdering, TransactionRegistry

logger = logging.getLogger(__name__)


def build_parser(config: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="to-scheduler",
        description="Timestamp-ordering schedule validator",
    )
    parser.add_argument("--input", default=config.input_path,
                        help="Path to the input file containing data records, transactions and schedule plans")
    parser.add_argument("--output", default=config.output_path,
                        help="Directory where out.txt and the per-item logs are written")
    parser.add_argument("--commit-policy", default=config.commit_policy,
                        choices=TimestampOrdering.COMMIT_POLICIES,
                        help="Effect of a commit on item timestamps (default: %(default)s)")
    return parser


def run(input_path: str, output_path: str, commit_policy: str) -> int:
    try:
        parsed = parse_input(input_path)
    except ParserError as e:
        logger.error("Failed to parse input data: %s", e)
        return 1

    scheduler = TimestampOrdering(
        DataItemRegistry(parsed.data_items),
        TransactionRegistry(parsed.transactions),
        commit_policy=commit_policy,
    )
    processor = ScheduleProcessor(scheduler)

    try:
        with FileOutputSink(output_path) as sink:
            processor.process(parsed.schedule_plans, sink)
    except ProcessorError as e:
        logger.error("Failed to process schedule: %s", e)
        return 1

    logger.info("Schedule validation completed successfully")
    return 0


def main(argv=None) -> int:
    try:
        config = Config()
    except ValidationError as e:
        configure_logging()
        logger.error("Invalid configuration: %s", e)
        return 1
    configure_logging(config.log_level)

    args = build_parser(config).parse_args(argv)
    logger.debug("Input file: %s, Output directory: %s", args.input, args.output)
    return run(args.input, args.output, args.commit_policy)


if __name__ == "__main__":
    sys.exit(main())
