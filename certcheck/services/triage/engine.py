"""Concurrent validation-and-triage pass over one certificate directory."""

import asyncio
from pathlib import Path

import structlog

from certcheck.core.exceptions import CertCheckError
from certcheck.schemas.triage import Invalid, RunResult, Unprocessable
from certcheck.services.encoder import CertificateEncoder
from certcheck.services.oracle.base import ValidityOracle
from certcheck.services.triage.directory import list_certificate_files, move_certificate

logger = structlog.get_logger()


class TriageEngine:
    """Validates every file of a directory in parallel and relocates it by verdict.

    Each file runs in its own coroutine; blocking reads and moves go through
    asyncio.to_thread(). Workers return their outcome instead of writing to
    shared state, and the pass folds them into the result sets only after
    every worker has finished.
    """

    def __init__(
        self,
        oracle: ValidityOracle,
        invalid_dir: Path,
        keep_failed: bool = False,
        encoder: CertificateEncoder | None = None,
    ):
        self._oracle = oracle
        self._invalid_dir = Path(invalid_dir)
        self._keep_failed = keep_failed
        self._encoder = encoder or CertificateEncoder()

    async def validate_directory(self, source_dir: Path, dest_on_success: Path | None = None) -> RunResult:
        """Triage every file directly under ``source_dir``.

        Valid files move to ``dest_on_success`` when given and stay put
        otherwise. Raises DirectoryError if the directory cannot be listed.
        """
        source_dir = Path(source_dir)
        files = await asyncio.to_thread(list_certificate_files, source_dir)
        logger.info(
            "triage_pass_started",
            source_dir=str(source_dir),
            files=len(files),
            dest_on_success=str(dest_on_success) if dest_on_success else None,
        )

        outcomes = await asyncio.gather(*[self._triage_file(f, dest_on_success) for f in files])

        result = RunResult(source_dir=source_dir, enumerated=len(files))
        for outcome in outcomes:
            if isinstance(outcome, Invalid):
                result.invalid.add(outcome)
            elif isinstance(outcome, Unprocessable):
                result.unprocessable.add(outcome)
            else:
                result.valid += 1

        logger.info(
            "triage_pass_complete",
            source_dir=str(source_dir),
            total=result.enumerated,
            valid=result.valid,
            invalid=len(result.invalid),
            unprocessable=len(result.unprocessable),
        )
        return result

    async def _triage_file(self, path: Path, dest_on_success: Path | None) -> Invalid | Unprocessable | None:
        """Run one file through encode, check and move. Returns None for a valid file."""
        file_name = path.name
        try:
            encoded = await asyncio.to_thread(self._encoder.encode, path)
            verdict = await self._oracle.check(encoded)

            if not verdict.is_valid:
                reasons = verdict.reasons()
                if not self._keep_failed:
                    await asyncio.to_thread(move_certificate, path, self._invalid_dir)
                logger.info("certificate_invalid", file=file_name, reasons=list(reasons), kept=self._keep_failed)
                return Invalid(file_name=file_name, reasons=reasons)

            if dest_on_success is not None:
                await asyncio.to_thread(move_certificate, path, dest_on_success)
            logger.debug("certificate_valid", file=file_name, moved_to=str(dest_on_success) if dest_on_success else None)
            return None

        except CertCheckError as e:
            logger.warning("certificate_unprocessable", file=file_name, code=e.code, error=e.message)
            return Unprocessable(file_name=file_name, code=e.code, message=e.message)
        except Exception as e:
            logger.exception("certificate_triage_error", file=file_name)
            return Unprocessable(file_name=file_name, code="unexpected_error", message=f"{e.__class__.__name__}: {e}")
