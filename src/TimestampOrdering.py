import logging

logger = logging.getLogger(__name__)

READ_OPERATION      = "read"
WRITE_OPERATION     = "write"
COMMIT_OPERATION    = "commit"

COMMIT_NOOP         = "noop"
COMMIT_RESET        = "reset"


class NotFound(LookupError):
    pass


class SchedulerError(Exception):
    pass


class DataItem:
    def __init__(self, item_id: str, ts_read: int = 0, ts_write: int = 0) -> None:
        self.item_id    = item_id
        self.ts_read    = ts_read
        self.ts_write   = ts_write

    def is_readable(self, tx: "Transaction") -> bool:
        return tx.ts >= self.ts_write

    def is_writable(self, tx: "Transaction") -> bool:
        return tx.ts >= self.ts_read and tx.ts >= self.ts_write

    def reset(self) -> None:
        self.ts_read    = 0
        self.ts_write   = 0

    def __str__(self):
        return f"<{self.item_id}, {self.ts_read}, {self.ts_write}>"


class Transaction:
    def __init__(self, tx_id: str, ts: int = 0) -> None:
        self.tx_id  = tx_id
        self.ts     = ts

    def __str__(self):
        return f"{self.tx_id}(ts={self.ts})"


class Operation:
    SHORT_NAMES = {READ_OPERATION: "r", WRITE_OPERATION: "w", COMMIT_OPERATION: "c"}

    def __init__(self, operation: str, tx_id: str, item_id: str = "") -> None:
        if (operation not in self.SHORT_NAMES):
            raise ValueError(f"Invalid operation type: {operation}")
        if (operation != COMMIT_OPERATION and not item_id):
            raise ValueError(f"{operation} operation requires a data item")

        self.operation  = operation
        self.tx_id      = tx_id
        self.item_id    = item_id if operation != COMMIT_OPERATION else ""

    def __eq__(self, other):
        if not isinstance(other, Operation):
            return NotImplemented
        return (self.operation, self.tx_id, self.item_id) == (other.operation, other.tx_id, other.item_id)

    def __repr__(self):
        return f"Operation({self.operation!r}, {self.tx_id!r}, {self.item_id!r})"

    def __str__(self):
        tx_number = self.tx_id[1:] if self.tx_id.upper().startswith("T") else self.tx_id
        if self.operation == COMMIT_OPERATION:
            return f"c{tx_number}"
        return f"{self.SHORT_NAMES[self.operation]}{tx_number}({self.item_id})"


class SchedulePlan:
    def __init__(self, schedule_id: str, operations=None) -> None:
        self.schedule_id    = schedule_id
        self.operations     = list(operations) if operations is not None else []

    def __str__(self):
        return f"{self.schedule_id}: {' '.join(str(op) for op in self.operations)}"


class _Registry:
    kind = "Record"

    def __init__(self, records=None) -> None:
        self._records = {}
        for record in records or []:
            key = self._key(record)
            if key in self._records:
                raise ValueError(f"Duplicate {self.kind.lower()} id: {key}")
            self._records[key] = record

    def _key(self, record) -> str:
        raise NotImplementedError

    def get(self, record_id: str):
        try:
            return self._records[record_id]
        except KeyError:
            raise NotFound(f"{self.kind} {record_id} not found") from None

    def ids(self):
        return list(self._records.keys())

    def __contains__(self, record_id):
        return record_id in self._records

    def __iter__(self):
        return iter(self._records.values())

    def __len__(self):
        return len(self._records)


class DataItemRegistry(_Registry):
    kind = "Data item"

    def _key(self, record: DataItem) -> str:
        return record.item_id

    def bump_read(self, item_id: str, ts: int) -> None:
        item = self.get(item_id)
        if item.ts_read < ts:
            item.ts_read = ts

    def set_write(self, item_id: str, ts: int) -> None:
        self.get(item_id).ts_write = ts

    def reset_all(self) -> None:
        for item in self:
            item.reset()


class TransactionRegistry(_Registry):
    kind = "Transaction"

    def _key(self, record: Transaction) -> str:
        return record.tx_id


class TimestampOrdering:
    """Basic timestamp-ordering validator.

    Each read or write is checked against the item's read/write high-water
    marks at the moment it is reached. The first illegal operation rolls the
    whole plan back; its 0-based index is reported in the verdict and used in
    the audit records.
    """

    COMMIT_POLICIES = (COMMIT_NOOP, COMMIT_RESET)

    def __init__(self, data_items: DataItemRegistry, transactions: TransactionRegistry,
                 commit_policy: str = COMMIT_NOOP) -> None:
        if (commit_policy not in self.COMMIT_POLICIES):
            raise ValueError(f"Unknown commit policy: {commit_policy}")

        self.items          = data_items
        self.transactions   = transactions
        self.commit_policy  = commit_policy
        self.plan           = None
        self.audit_log      = {item_id: [] for item_id in data_items.ids()}

    def set_schedule(self, plan: SchedulePlan) -> None:
        if (not plan.schedule_id):
            raise SchedulerError("Schedule plan has no id")

        logger.debug("Setting schedule %s with %d operations", plan.schedule_id, len(plan.operations))
        self.plan = plan

    def check_if_serializable(self) -> str:
        if (self.plan is None):
            raise SchedulerError("No schedule plan set")

        schedule_id = self.plan.schedule_id
        logger.debug("Checking if schedule %s is serializable", schedule_id)

        for position, op in enumerate(self.plan.operations):
            if (not self.is_legal(op)):
                logger.info("Schedule %s is not serializable, rolling back at %d (%s)", schedule_id, position, op)
                return f"{schedule_id}-ROLLBACK-{position}"

            self.apply(op, position)

        logger.info("Schedule %s is serializable", schedule_id)
        return f"{schedule_id}-OK"

    def is_legal(self, op: Operation) -> bool:
        if (op.operation == COMMIT_OPERATION):
            return True

        tx      = self.lookup_transaction(op)
        item    = self.lookup_item(op)

        if (op.operation == READ_OPERATION):
            return item.is_readable(tx)
        return item.is_writable(tx)

    def apply(self, op: Operation, position: int) -> None:
        if (op.operation == COMMIT_OPERATION):
            if (self.commit_policy == COMMIT_RESET):
                logger.debug("Commit of %s clears all item timestamps", op.tx_id)
                self.items.reset_all()
            return

        tx = self.transactions.get(op.tx_id)
        if (op.operation == READ_OPERATION):
            self.items.bump_read(op.item_id, tx.ts)
        else:
            self.items.set_write(op.item_id, tx.ts)

        self.audit_log[op.item_id].append(f"{self.plan.schedule_id},{op.operation},{position}")

    def lookup_transaction(self, op: Operation) -> Transaction:
        try:
            return self.transactions.get(op.tx_id)
        except NotFound:
            logger.error("Transaction %s not found for %s operation", op.tx_id, op.operation)
            raise

    def lookup_item(self, op: Operation) -> DataItem:
        try:
            return self.items.get(op.item_id)
        except NotFound:
            logger.error("Data item %s not found for %s operation", op.item_id, op.operation)
            raise

    def reset(self) -> None:
        logger.debug("Resetting item timestamps")
        self.items.reset_all()
        self.plan = None

    def data_items(self):
        return list(self.items)

    def operations_for_data_items(self) -> dict:
        return {item_id: list(records) for item_id, records in self.audit_log.items()}

    def __str__(self):
        return ", ".join(str(item) for item in self.items)
