class CertCheckError(Exception):
    """Base exception for certificate check errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict | None = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        result = {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class EncodingError(CertCheckError):
    """A file could not be read or parsed as a certificate."""

    def __init__(self, path: str, cause: str):
        super().__init__(
            code="encoding_error",
            message=f"Cannot encode certificate '{path}': {cause}",
            details={"path": path, "cause": cause},
        )


class OracleError(CertCheckError):
    """The trust authority call failed. ``kind`` is transport, status or body."""

    KINDS = ("transport", "status", "body")

    def __init__(self, kind: str, message: str, details: dict | None = None):
        if kind not in self.KINDS:
            raise ValueError(f"Unknown oracle error kind: {kind}")
        self.kind = kind
        super().__init__(code=f"oracle_{kind}_error", message=message, details=details)


class TransitionError(CertCheckError):
    """A verdict was reached but the file could not be relocated."""

    def __init__(self, source: str, destination: str, cause: str):
        super().__init__(
            code="transition_error",
            message=f"Cannot move '{source}' to '{destination}': {cause}",
            details={"source": source, "destination": destination, "cause": cause},
        )


class DirectoryError(CertCheckError):
    def __init__(self, directory: str, cause: str):
        super().__init__(
            code="directory_error",
            message=f"Cannot enumerate directory '{directory}': {cause}",
            details={"directory": directory, "cause": cause},
        )


class ConfigurationError(CertCheckError):
    def __init__(self, message: str = "Invalid configuration.", details: dict | None = None):
        super().__init__(code="configuration_error", message=message, details=details)


class NotificationError(CertCheckError):
    def __init__(self, message: str = "Notification could not be delivered.", details: dict | None = None):
        super().__init__(code="notification_error", message=message, details=details)
