"""Fake trust authority for testing.

The verdict is driven by the certificate's common name:
    "status-500..."     -> HTTP 500
    "garbage-body..."   -> 200 with a non-JSON body
    "missing-facet..."  -> 200 with NotExpired absent
    otherwise a facet is false when the CN contains "bad-qtsp",
    "bad-signature", "revoked" or "expired".

Run standalone: uvicorn tests.mocks.fake_authority:app --port 8002
"""

import asyncio
import binascii
import random

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from certcheck.services.oracle.client import basic_auth_value
from tests.mocks.certificates import common_name_of

CLIENT_ID = "test-client"
CLIENT_SECRET = "test-secret"
FI_REFERENCE_ID = "FI-0001"
CHECK_URL = "http://fake-authority/api/eidas/check"

app = FastAPI(title="Fake Trust Authority")
app.state.max_latency = 0.0
app.state.requests = 0


def facets_for(common_name: str) -> dict:
    return {
        "ValidQTSP": "bad-qtsp" not in common_name,
        "validSignature": "bad-signature" not in common_name,
        "NotRevoked": "revoked" not in common_name,
        "NotExpired": "expired" not in common_name,
    }


@app.get("/api/eidas/check")
async def check(request: Request):
    app.state.requests += 1
    if app.state.max_latency:
        await asyncio.sleep(random.uniform(0, app.state.max_latency))

    if request.headers.get("authorization") != basic_auth_value(CLIENT_ID, CLIENT_SECRET):
        return JSONResponse(status_code=401, content={"error": "unauthorized"})
    if request.headers.get("fi_reference_id") != FI_REFERENCE_ID or request.headers.get("version") != "1":
        return JSONResponse(status_code=400, content={"error": "bad context headers"})

    try:
        cn = common_name_of(request.headers.get("eidas", ""))
    except (ValueError, binascii.Error, IndexError):
        return JSONResponse(status_code=400, content={"error": "bad certificate"})

    if cn.startswith("status-500"):
        return JSONResponse(status_code=500, content={"error": "internal"})
    if cn.startswith("garbage-body"):
        return PlainTextResponse("<html>maintenance</html>")

    validity = facets_for(cn)
    if cn.startswith("missing-facet"):
        del validity["NotExpired"]
    return {"eIDAS": {"Validity": validity}}
