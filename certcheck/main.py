import sys

import httpx
import structlog

from certcheck.config import Settings
from certcheck.services.notifier import EmailNotifier
from certcheck.services.oracle.client import TrustAuthorityClient
from certcheck.services.orchestrator import RunOrchestrator, RunReport
from certcheck.services.triage.directory import CertificateDirectories
from certcheck.services.triage.engine import TriageEngine

_NAME_TO_LEVEL = {
    "debug": 10,
    "info": 20,
    "warning": 30,
    "warn": 30,
    "error": 40,
    "critical": 50,
}


def configure_logging(level: str = "info") -> None:
    """JSON logs on stderr; stdout carries only the invalid-certificate report."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_NAME_TO_LEVEL.get(level.lower(), 20)),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


async def run(settings: Settings, http_client: httpx.AsyncClient | None = None, notifier: EmailNotifier | None = None) -> RunReport:
    """Wire the run's components from settings and execute both passes."""
    logger = structlog.get_logger()
    oracle = TrustAuthorityClient.from_settings(settings, http_client=http_client)
    directories = CertificateDirectories.from_settings(settings)
    engine = TriageEngine(
        oracle=oracle,
        invalid_dir=directories.invalid,
        keep_failed=settings.certcheck_keep_failed,
    )
    orchestrator = RunOrchestrator(
        engine=engine,
        directories=directories,
        notifier=notifier or EmailNotifier.from_settings(settings),
        keep_failed=settings.certcheck_keep_failed,
    )

    logger.info(
        "run_started",
        check_url=settings.certcheck_check_url,
        regular_dir=str(directories.regular),
        initial_dir=str(directories.initial),
        invalid_dir=str(directories.invalid),
        keep_failed=settings.certcheck_keep_failed,
    )
    try:
        return await orchestrator.run_checks()
    finally:
        await oracle.close()
