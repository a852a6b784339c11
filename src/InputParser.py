import logging
import os
import re

from TimestampOrdering import (
    COMMIT_OPERATION,
    READ_OPERATION,
    WRITE_OPERATION,
    DataItem,
    Operation,
    SchedulePlan,
    Transaction,
)

logger = logging.getLogger(__name__)

OPERATION_PATTERN   = re.compile(r"([A-Za-z])(\d*)(?:\(([^)]*)\))?")
OPERATION_TYPES     = {"r": READ_OPERATION, "w": WRITE_OPERATION, "c": COMMIT_OPERATION}
OPERATION_SEPARATORS = " \t;"


class ParserError(ValueError):
    def __init__(self, message: str, line_number: int = 0) -> None:
        super().__init__(message)
        self.message        = message
        self.line_number    = line_number

    def __str__(self):
        return f"Line {self.line_number}: {self.message}"


class ParsedInput:
    def __init__(self, data_items, transactions, schedule_plans) -> None:
        self.data_items     = data_items
        self.transactions   = transactions
        self.schedule_plans = schedule_plans


def split_list(line: str) -> list:
    return [x.strip() for x in line.strip().rstrip(";").split(",") if x.strip()]


def parse_data_items(line: str) -> list:
    ids = split_list(line)
    if not ids:
        raise ParserError("No data records found", 1)
    if len(set(ids)) != len(ids):
        raise ParserError("Duplicate data record id", 1)
    for item_id in ids:
        if item_id in (".", "..") or "/" in item_id or "\\" in item_id:
            raise ParserError(f"Invalid data record id: {item_id}", 1)

    logger.debug("Parsed %d data records", len(ids))
    return [DataItem(item_id) for item_id in ids]


def parse_transactions(transaction_line: str, timestamps_line: str) -> list:
    tx_ids = [x.upper() for x in split_list(transaction_line)]
    if not tx_ids:
        raise ParserError("No transaction records found", 2)
    if len(set(tx_ids)) != len(tx_ids):
        raise ParserError("Duplicate transaction id", 2)

    timestamps = split_list(timestamps_line)
    if not timestamps:
        raise ParserError("No timestamps found", 3)

    if len(tx_ids) != len(timestamps):
        raise ParserError("Transaction and timestamp counts do not match", 2)

    transactions = []
    for tx_id, raw_ts in zip(tx_ids, timestamps):
        try:
            ts = int(raw_ts)
        except ValueError:
            raise ParserError(f"Invalid timestamp for {tx_id}: {raw_ts}", 3) from None
        if ts < 0:
            raise ParserError(f"Timestamp for {tx_id} must not be negative: {raw_ts}", 3)
        transactions.append(Transaction(tx_id, ts))

    logger.debug("Parsed %d transaction records", len(transactions))
    return transactions


def parse_operation(match, line_number: int) -> Operation:
    letter, digits, item_id = match.group(1), match.group(2), match.group(3) or ""
    operation = OPERATION_TYPES.get(letter.lower())
    if operation is None:
        raise ParserError(f"Invalid operation type: {match.group(0)}", line_number)

    if operation != COMMIT_OPERATION:
        if not digits:
            raise ParserError(f"Missing transaction number: {match.group(0)}", line_number)
        if not item_id.strip():
            raise ParserError(f"Missing data item: {match.group(0)}", line_number)

    tx_id = f"T{digits}" if digits else ""
    return Operation(operation, tx_id, item_id.strip())


def parse_schedule_plan(line: str, line_number: int) -> SchedulePlan:
    logger.debug("Parsing schedule plan from line %d: %s", line_number, line)

    if "-" not in line:
        raise ParserError("Invalid schedule plan format. Expected 'ScheduleId - Operations'", line_number)

    schedule_id, ops_string = (part.strip() for part in line.split("-", 1))
    if not schedule_id:
        raise ParserError("Missing schedule id", line_number)

    matches = list(OPERATION_PATTERN.finditer(ops_string))
    if not matches:
        raise ParserError("No operations found in schedule plan", line_number)

    position = 0
    for match in matches + [None]:
        end = match.start() if match is not None else len(ops_string)
        leftover = ops_string[position:end].strip(OPERATION_SEPARATORS)
        if leftover:
            raise ParserError(f"Unexpected text in schedule plan: {leftover!r}", line_number)
        if match is not None:
            position = match.end()

    operations = [parse_operation(match, line_number) for match in matches]
    return SchedulePlan(schedule_id, operations)


def parse_input_text(text: str) -> ParsedInput:
    lines = text.splitlines()
    if not lines or not lines[0].strip():
        raise ParserError("Input is empty", 1)

    data_items = parse_data_items(lines[0])

    if len(lines) < 2:
        raise ParserError("No transaction records found", 2)
    if len(lines) < 3:
        raise ParserError("No transaction timestamps found", 3)

    transactions = parse_transactions(lines[1], lines[2])

    schedule_plans = []
    for line_number, line in enumerate(lines[3:], start=4):
        if not line.strip():
            logger.debug("Skipping empty line at %d", line_number)
            continue
        schedule_plans.append(parse_schedule_plan(line, line_number))

    logger.info(
        "Input data loaded: %d data records, %d transactions and %d schedule plans",
        len(data_items), len(transactions), len(schedule_plans),
    )
    return ParsedInput(data_items, transactions, schedule_plans)


def parse_input(file_path: str) -> ParsedInput:
    logger.debug("Parsing input data from %s", file_path)

    if not os.path.isfile(file_path):
        raise ParserError(f"Input file not found: {file_path}")

    try:
        with open(file_path, encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise ParserError(f"Failed to read input file: {e}") from e

    return parse_input_text(text)
