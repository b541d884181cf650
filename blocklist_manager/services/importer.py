from __future__ import annotations
import asyncio
from enum import Enum
from typing import List, Set

from blocklist_manager.core.exceptions import ImportInProgressError, UpstreamError
from blocklist_manager.core.import_guard import ImportGuard, Permit
from blocklist_manager.core.zoraxy_client import ZoraxyClient
from blocklist_manager.schemas.blocklist import parse_blocklist
from blocklist_manager.utils.logger import get_logger, log_execution_time

logger = get_logger(__name__)


class JobState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"


class ImportJob:
    """
    Pushes a list of IPs into one access rule, one request at a time.

    The job owns the permit it was created with and gives it back when it
    finishes, however it finishes. A failed IP is logged and skipped.
    """

    def __init__(self, client: ZoraxyClient, access_rule_id: str, ips: List[str], permit: Permit):
        self.client = client
        self.access_rule_id = access_rule_id
        self.ips = list(ips)
        self.permit = permit
        self.state = JobState.PENDING
        self.succeeded = 0
        self.failed = 0

    @log_execution_time(level="INFO")
    async def run(self) -> None:
        total = len(self.ips)
        try:
            with self.permit:
                self.state = JobState.RUNNING
                for i, ip in enumerate(self.ips, start=1):
                    logger.info(f"Importing IP {i}/{total} to Access Rule ID: {self.access_rule_id}")
                    try:
                        await self.client.add_ip_to_blacklist(self.access_rule_id, ip)
                    except UpstreamError as e:
                        self.failed += 1
                        logger.warning(
                            "Failed to import IP to Access Rule",
                            extra={"extra_fields": {
                                "access_rule_id": self.access_rule_id,
                                "ip": ip,
                                "error": e.message,
                            }},
                        )
                        continue
                    self.succeeded += 1
                self.state = JobState.COMPLETED
        finally:
            outcome = "Finished" if self.state == JobState.COMPLETED else "Aborted"
            logger.info(
                f"{outcome} import to Access Rule ID: {self.access_rule_id}",
                extra={"extra_fields": {
                    "access_rule_id": self.access_rule_id,
                    "total": total,
                    "succeeded": self.succeeded,
                    "failed": self.failed,
                }},
            )


class ImportService:
    """
    Admits import requests and runs each accepted one as a detached task.

    The guard is acquired once, here, and that permit is handed to the job.
    A request that finds the guard busy is rejected straight away.
    """

    def __init__(self, client: ZoraxyClient, guard: ImportGuard):
        self.client = client
        self.guard = guard
        self._tasks: Set[asyncio.Task] = set()

    @property
    def active_jobs(self) -> int:
        return len(self._tasks)

    def start_import(self, access_rule_id: str, blocklist: str) -> str:
        """
        Start importing ``blocklist`` into ``access_rule_id`` in the background.

        Must be called from inside a running event loop.

        Returns:
            The message to hand back to the caller.

        Raises:
            ImportInProgressError: another import holds the guard
        """
        loop = asyncio.get_running_loop()
        ips = parse_blocklist(blocklist)

        permit = self.guard.try_acquire()
        if permit is None:
            logger.warning("Import already in progress, rejecting new import request")
            raise ImportInProgressError()

        job = ImportJob(self.client, access_rule_id, ips, permit)
        task = loop.create_task(job.run(), name=f"import-{access_rule_id}")
        self._tasks.add(task)
        # a task cancelled before its first step never enters run()
        task.add_done_callback(lambda _task: permit.release())
        task.add_done_callback(self._on_job_done)

        message = (
            f"Started import of {len(ips)} IPs to Access Rule ID: {access_rule_id}, "
            "check logs for progress."
        )
        logger.info(message)
        return message

    def _on_job_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning(f"Import task {task.get_name()} was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                f"Import task {task.get_name()} crashed",
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    async def wait_idle(self) -> None:
        """Wait for every running import to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
