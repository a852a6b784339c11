import logging
import os
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class ProcessorError(Exception):
    pass


class OutputSink(ABC):
    @abstractmethod
    def write_verdict(self, line: str) -> None: ...

    @abstractmethod
    def write_audit_log(self, item_id: str, records: list) -> None: ...


class InMemoryOutputSink(OutputSink):
    def __init__(self) -> None:
        self.verdicts   = []
        self.audit_logs = {}

    def write_verdict(self, line: str) -> None:
        self.verdicts.append(line)

    def write_audit_log(self, item_id: str, records: list) -> None:
        self.audit_logs[item_id] = list(records)


class FileOutputSink(OutputSink):
    """Writes verdicts to ``<output_dir>/out.txt`` and one ``<item>.txt`` per data item."""

    VERDICT_FILE = "out.txt"

    def __init__(self, output_dir: str) -> None:
        self.output_dir = output_dir
        self.verdict_path = os.path.join(output_dir, self.VERDICT_FILE)
        self._file = None

    def __enter__(self):
        if not os.path.isdir(self.output_dir):
            logger.warning("Output directory does not exist, creating: %s", self.output_dir)
            try:
                os.makedirs(self.output_dir)
            except OSError as e:
                raise ProcessorError(f"Failed to create output directory: {e}") from e

        logger.info("Output file will be created at %s", self.verdict_path)
        try:
            self._file = open(self.verdict_path, "w", encoding="utf-8")
        except OSError as e:
            raise ProcessorError(f"Failed to open output file: {e}") from e
        return self

    def __exit__(self, exc_type, exc, tb):
        self._file.close()
        self._file = None
        return False

    def write_verdict(self, line: str) -> None:
        try:
            self._file.write(line + "\n")
            # verdicts already written must survive a later abort
            self._file.flush()
        except OSError as e:
            raise ProcessorError(f"Failed to write verdict: {e}") from e

    def audit_log_path(self, item_id: str) -> str:
        if item_id in ("", ".", "..") or "/" in item_id or "\\" in item_id:
            raise ProcessorError(f"Data item id cannot be used as a file name: {item_id!r}")
        return os.path.join(self.output_dir, f"{item_id}.txt")

    def write_audit_log(self, item_id: str, records: list) -> None:
        path = self.audit_log_path(item_id)
        try:
            with open(path, "w", encoding="utf-8") as f:
                for record in records:
                    f.write(record + "\n")
        except OSError as e:
            raise ProcessorError(f"Failed to write audit log for {item_id}: {e}") from e


class ScheduleProcessor:
    def __init__(self, scheduler) -> None:
        self.scheduler = scheduler

    def process(self, schedule_plans, sink: OutputSink) -> list:
        logger.debug("Processing schedule plans...")

        verdicts = []
        for plan in schedule_plans:
            verdict = self.process_plan(plan, sink)
            verdicts.append(verdict)

        if verdicts:
            logger.info("Saving data operations")
            for item_id, records in self.scheduler.operations_for_data_items().items():
                logger.debug("Data ID: %s, Operations: %s", item_id, ", ".join(records))
                sink.write_audit_log(item_id, records)

        logger.info("Schedule plans processed successfully")
        return verdicts

    def process_plan(self, plan, sink: OutputSink) -> str:
        schedule_id = plan.schedule_id
        logger.debug("Processing schedule plan with ID %s", schedule_id)

        try:
            self.scheduler.set_schedule(plan)
        except Exception as e:
            logger.error("Failed to set schedule %s: %s", schedule_id, e)
            raise ProcessorError(f"Failed to set schedule for plan {schedule_id}: {e}") from e

        try:
            verdict = self.scheduler.check_if_serializable()
        except Exception as e:
            logger.error("Failed to check if schedule %s is serializable: %s", schedule_id, e)
            raise ProcessorError(f"Failed to check serializability for plan {schedule_id}: {e}") from e

        logger.info("Schedule %s processed: %s", schedule_id, verdict)
        sink.write_verdict(verdict)

        try:
            self.scheduler.reset()
        except Exception as e:
            logger.error("Failed to reset scheduler: %s", e)
            raise ProcessorError(f"Failed to reset scheduler after processing plan {schedule_id}") from e

        return verdict
