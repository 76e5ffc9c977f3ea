import base64

import httpx
import structlog
from pydantic import ValidationError

from certcheck.core.exceptions import OracleError
from certcheck.schemas.verdict import AuthorityResponse, ValidationVerdict
from certcheck.services.oracle.base import ValidityOracle

logger = structlog.get_logger()


def basic_auth_value(client_id: str, client_secret: str) -> str:
    token = base64.b64encode(f"{client_id}:{client_secret}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class TrustAuthorityClient(ValidityOracle):
    def __init__(
        self,
        check_url: str,
        client_id: str,
        client_secret: str,
        fi_reference_id: str,
        api_version: str = "1",
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        self.check_url = check_url
        # Built once per run; every request reuses the same credential headers.
        self._headers = {
            "Authorization": basic_auth_value(client_id, client_secret),
            "fi_reference_id": fi_reference_id,
            "version": api_version,
        }
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    @classmethod
    def from_settings(cls, settings, http_client: httpx.AsyncClient | None = None) -> "TrustAuthorityClient":
        return cls(
            check_url=settings.certcheck_check_url,
            client_id=settings.certcheck_client_id,
            client_secret=settings.certcheck_client_secret.get_secret_value(),
            fi_reference_id=settings.certcheck_fi_reference_id,
            api_version=settings.certcheck_api_version,
            http_client=http_client,
            timeout=settings.certcheck_http_timeout,
        )

    async def check(self, encoded_certificate: str) -> ValidationVerdict:
        headers = {**self._headers, "eidas": encoded_certificate}

        try:
            response = await self._client.get(self.check_url, headers=headers)
        except httpx.HTTPError as e:
            raise OracleError(
                "transport",
                f"Cannot reach trust authority at {self.check_url}: {e.__class__.__name__}: {e}",
                details={"url": self.check_url},
            )

        if response.status_code != httpx.codes.OK:
            raise OracleError(
                "status",
                f"Trust authority returned status {response.status_code}",
                details={"url": self.check_url, "status": response.status_code},
            )

        try:
            verdict = AuthorityResponse.from_json(response.json()).to_verdict()
        except ValueError as e:
            # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
            cause = "missing or malformed validity fields" if isinstance(e, ValidationError) else "body is not JSON"
            raise OracleError(
                "body",
                f"Cannot decode trust authority response: {cause}",
                details={"url": self.check_url, "status": response.status_code, "cause": cause},
            )

        logger.debug("authority_verdict", valid=verdict.is_valid, reasons=list(verdict.reasons()))
        return verdict

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
