import pytest

from certcheck.core.exceptions import (
    CertCheckError,
    ConfigurationError,
    DirectoryError,
    EncodingError,
    NotificationError,
    OracleError,
    TransitionError,
)


def test_error_to_dict():
    err = CertCheckError(code="test_error", message="Something broke")
    d = err.to_dict()
    assert d["error"]["code"] == "test_error"
    assert d["error"]["message"] == "Something broke"
    assert "details" not in d["error"]


def test_encoding_error_details():
    err = EncodingError("/certs/a.pem", "file is empty")
    assert err.code == "encoding_error"
    assert err.to_dict()["error"]["details"] == {"path": "/certs/a.pem", "cause": "file is empty"}


@pytest.mark.parametrize("kind", ["transport", "status", "body"])
def test_oracle_error_codes_are_distinct_per_kind(kind):
    err = OracleError(kind, "failed")
    assert err.kind == kind
    assert err.code == f"oracle_{kind}_error"


def test_oracle_error_rejects_unknown_kind():
    with pytest.raises(ValueError):
        OracleError("timeout", "failed")


def test_transition_error_is_not_a_validation_failure():
    err = TransitionError("/a/x.pem", "/b/x.pem", "destination file already exists")
    assert err.code == "transition_error"
    assert not isinstance(err, (EncodingError, OracleError))


def test_defaults():
    assert ConfigurationError().code == "configuration_error"
    assert NotificationError().code == "notification_error"
    assert DirectoryError("/x", "missing").details["directory"] == "/x"
