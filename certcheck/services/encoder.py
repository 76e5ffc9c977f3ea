"""Certificate file reader producing the authority's transport encoding."""

import base64
from pathlib import Path

import structlog
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization

from certcheck.core.exceptions import EncodingError

logger = structlog.get_logger()

PEM_MARKER = b"-----BEGIN"


class CertificateEncoder:
    """Parses PEM or DER certificate files into base64-encoded DER.

    Blocking: the triage engine calls it through asyncio.to_thread().
    """

    def load(self, path: Path) -> x509.Certificate:
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise EncodingError(str(path), e.strerror or str(e))

        if not data:
            raise EncodingError(str(path), "file is empty")

        try:
            if PEM_MARKER in data:
                return x509.load_pem_x509_certificate(data)
            return x509.load_der_x509_certificate(data)
        except ValueError as e:
            raise EncodingError(str(path), f"not a valid X.509 certificate ({e})")

    def encode(self, path: Path) -> str:
        """Return base64 of the certificate's DER bytes."""
        cert = self.load(path)
        der = cert.public_bytes(serialization.Encoding.DER)
        logger.debug("certificate_encoded", path=str(path), der_bytes=len(der))
        return base64.b64encode(der).decode("ascii")

    def describe(self, path: Path) -> dict:
        """Subject, issuer, expiry and fingerprint for diagnostics."""
        cert = self.load(path)
        return {
            "subject": cert.subject.rfc4514_string(),
            "issuer": cert.issuer.rfc4514_string(),
            "serial_number": str(cert.serial_number),
            "not_valid_after": cert.not_valid_after_utc.isoformat(),
            "fingerprint_sha256": cert.fingerprint(hashes.SHA256()).hex().upper(),
            "encoded_length": len(self.encode(path)),
        }
