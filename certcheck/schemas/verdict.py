"""Pydantic schemas for trust authority responses and the decoded verdict."""

from pydantic import BaseModel, ConfigDict, StrictBool

REASON_INVALID_QTSP = "Issuer is not a valid QTSP"
REASON_INVALID_SIGNATURE = "Invalid certificate signature"
REASON_REVOKED = "Certificate is revoked"
REASON_EXPIRED = "Certificate is expired"


# ── Wire format ──────────────────────────────────────────────────────────
# Keys are lowercased before validation; the authority does not keep a
# stable casing ("eIDAS"/"eidas", "validSignature"/"ValidSignature").


class _ValidityRecord(BaseModel):
    validqtsp: StrictBool
    validsignature: StrictBool
    notrevoked: StrictBool
    notexpired: StrictBool


class _EidasRecord(BaseModel):
    validity: _ValidityRecord


class AuthorityResponse(BaseModel):
    eidas: _EidasRecord

    @classmethod
    def from_json(cls, data) -> "AuthorityResponse":
        return cls.model_validate(_lower_keys(data))

    def to_verdict(self) -> "ValidationVerdict":
        v = self.eidas.validity
        return ValidationVerdict(
            valid_qtsp=v.validqtsp,
            valid_signature=v.validsignature,
            not_revoked=v.notrevoked,
            not_expired=v.notexpired,
        )


def _lower_keys(data):
    if isinstance(data, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_lower_keys(v) for v in data]
    return data


# ── Verdict ──────────────────────────────────────────────────────────────


class ValidationVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid_qtsp: bool
    valid_signature: bool
    not_revoked: bool
    not_expired: bool

    @property
    def is_valid(self) -> bool:
        return self.valid_qtsp and self.valid_signature and self.not_revoked and self.not_expired

    def reasons(self) -> tuple[str, ...]:
        """One reason per failed facet, always in QTSP, signature, revocation, expiry order."""
        facets = [
            (self.valid_qtsp, REASON_INVALID_QTSP),
            (self.valid_signature, REASON_INVALID_SIGNATURE),
            (self.not_revoked, REASON_REVOKED),
            (self.not_expired, REASON_EXPIRED),
        ]
        return tuple(reason for ok, reason in facets if not ok)
