"""Run orchestrator: regular pass, then initial pass, with operator reporting after each."""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import structlog
from rich.console import Console

from certcheck.core.exceptions import DirectoryError, NotificationError
from certcheck.schemas.triage import Invalid, RunResult
from certcheck.services.messages import initial_check_message, regular_check_message
from certcheck.services.notifier import EmailNotifier
from certcheck.services.triage.directory import CertificateDirectories
from certcheck.services.triage.engine import TriageEngine

logger = structlog.get_logger()

MessageBuilder = Callable[[Invalid, Path, bool], tuple[str, str]]


@dataclass
class RunReport:
    results: list[RunResult] = field(default_factory=list)
    notifications_sent: int = 0
    notification_failures: list[NotificationError] = field(default_factory=list)
    directory_errors: list[DirectoryError] = field(default_factory=list)


class RunOrchestrator:
    """Runs both triage passes in sequence and reports their failures.

    Invalid certificates are printed to stdout and mailed to the operator;
    unprocessable ones are printed to stderr only.
    """

    def __init__(
        self,
        engine: TriageEngine,
        directories: CertificateDirectories,
        notifier: EmailNotifier,
        keep_failed: bool = False,
        console: Console | None = None,
        error_console: Console | None = None,
    ):
        self._engine = engine
        self._directories = directories
        self._notifier = notifier
        self._keep_failed = keep_failed
        self._console = console or Console()
        self._error_console = error_console or Console(stderr=True)

    async def run_checks(self) -> RunReport:
        """Triage regular/ then initial/. Raises the first DirectoryError after both passes ran."""
        report = RunReport()
        passes = [
            ("regular", self._directories.regular, None, regular_check_message),
            ("initial", self._directories.initial, self._directories.regular, initial_check_message),
        ]

        for name, source, dest_on_success, build_message in passes:
            try:
                result = await self._engine.validate_directory(source, dest_on_success)
            except DirectoryError as e:
                logger.error("triage_pass_failed", check=name, error=e.message)
                self._error_console.print(e.message, markup=False, highlight=False, soft_wrap=True)
                report.directory_errors.append(e)
                continue

            report.results.append(result)
            await self._report(result, build_message, report)

        logger.info(
            "run_complete",
            passes=len(report.results),
            notifications_sent=report.notifications_sent,
            notification_failures=len(report.notification_failures),
            directory_errors=len(report.directory_errors),
        )
        if report.directory_errors:
            raise report.directory_errors[0]
        return report

    async def _report(self, result: RunResult, build_message: MessageBuilder, report: RunReport) -> None:
        for invalid in sorted(result.invalid, key=lambda i: i.file_name):
            subject, body = build_message(invalid, self._directories.invalid, self._keep_failed)
            try:
                await asyncio.to_thread(self._notifier.send, subject, body)
                report.notifications_sent += 1
            except NotificationError as e:
                logger.error("notification_failed", file=invalid.file_name, error=e.message)
                self._error_console.print(f"{invalid.file_name}: {e.message}", markup=False, highlight=False, soft_wrap=True)
                report.notification_failures.append(e)
            self._console.print(f"{invalid.file_name}: {invalid.reason}", markup=False, highlight=False, soft_wrap=True)

        for unprocessable in sorted(result.unprocessable, key=lambda u: u.file_name):
            self._error_console.print(
                f"{unprocessable.file_name}: {unprocessable.message}", markup=False, highlight=False, soft_wrap=True
            )
