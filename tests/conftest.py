import httpx
import pytest
import pytest_asyncio
import structlog
from httpx import ASGITransport

from certcheck.services.oracle.client import TrustAuthorityClient
from certcheck.services.triage.directory import CertificateDirectories
from tests.mocks import fake_authority


@pytest.fixture
def cert_dirs(tmp_path):
    """initial/, regular/ and invalid/ under a temp dir."""
    dirs = CertificateDirectories(
        initial=tmp_path / "initial",
        regular=tmp_path / "regular",
        invalid=tmp_path / "invalid",
    )
    for d in (dirs.initial, dirs.regular, dirs.invalid):
        d.mkdir()
    return dirs


@pytest_asyncio.fixture
async def authority_http_client():
    """Async HTTP client wired to the fake trust authority via in-process ASGITransport."""
    fake_authority.app.state.max_latency = 0.0
    fake_authority.app.state.requests = 0
    transport = ASGITransport(app=fake_authority.app)
    client = httpx.AsyncClient(transport=transport, base_url="http://fake-authority")
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def authority_client(authority_http_client):
    return TrustAuthorityClient(
        check_url=fake_authority.CHECK_URL,
        client_id=fake_authority.CLIENT_ID,
        client_secret=fake_authority.CLIENT_SECRET,
        fi_reference_id=fake_authority.FI_REFERENCE_ID,
        http_client=authority_http_client,
    )


@pytest.fixture(autouse=True)
def _reset_structlog():
    """configure_logging() binds the current stderr; undo it between tests."""
    yield
    structlog.reset_defaults()
