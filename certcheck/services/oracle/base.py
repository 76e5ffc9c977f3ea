from abc import ABC, abstractmethod

from certcheck.schemas.verdict import ValidationVerdict


class ValidityOracle(ABC):
    @abstractmethod
    async def check(self, encoded_certificate: str) -> ValidationVerdict:
        """Ask the authority about one base64-encoded certificate.

        Raises OracleError on transport, status or body failures.
        """
        ...

    async def close(self) -> None:
        """Release any held connections."""
