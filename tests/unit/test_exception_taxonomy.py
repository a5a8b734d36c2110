"""Tests for the exception hierarchy.

Validates:
- ScanError structured attributes and ``to_error_dict()``
- Category of every exception the package raises
- Config and model validation errors share the validation family
"""

from __future__ import annotations

from typing import ClassVar

from signal_scan.clients.base import (
    MalformedResponseError,
    StatusClientError,
    StatusTransportError,
)
from signal_scan.core.config import ConfigValidationError
from signal_scan.core.exceptions import (
    ContractError,
    ScanError,
    TransientError,
    ValidationError,
)
from signal_scan.models.session import ModelValidationError


class TestScanErrorBase:
    """ScanError base class behavior."""

    def test_default_attributes(self) -> None:
        err = ScanError("boom")
        assert err.message == "boom"
        assert err.stage == ""
        assert err.code == ""
        assert err.retryable is False
        assert err.correlation_id == ""
        assert err.category == "unclassified"

    def test_str_is_message(self) -> None:
        assert str(ScanError("human-readable error")) == "human-readable error"

    def test_to_error_dict(self) -> None:
        err = StatusTransportError("abc123", "Could not reach the results service.")
        assert err.to_error_dict() == {
            "category": "transient",
            "code": "STATUS_TRANSPORT_FAILED",
            "stage": "status_client",
            "message": "Could not reach the results service.",
            "retryable": True,
            "correlation_id": "abc123",
        }


class TestCategories:
    def test_validation(self) -> None:
        err = ValidationError("bad input")
        assert err.category == "validation"
        assert err.retryable is False

    def test_transient_defaults_retryable(self) -> None:
        err = TransientError("timeout")
        assert err.category == "transient"
        assert err.retryable is True

    def test_contract(self) -> None:
        err = ContractError("schema drift")
        assert err.category == "contract"
        assert err.retryable is False


class TestAllExceptionsAreScanError:
    """Every custom exception inherits from ScanError."""

    EXCEPTION_CLASSES: ClassVar[list[type[ScanError]]] = [
        ConfigValidationError,
        ModelValidationError,
        StatusClientError,
        StatusTransportError,
        MalformedResponseError,
    ]

    def test_all_subclass_scan_error(self) -> None:
        for cls in self.EXCEPTION_CLASSES:
            assert issubclass(cls, ScanError), f"{cls.__name__} is not a ScanError"


class TestStatusClientExceptions:
    def test_transport_error_is_transient(self) -> None:
        err = StatusTransportError("abc123", "connection refused")
        assert err.identifier == "abc123"
        assert err.correlation_id == "abc123"
        assert err.stage == "status_client"
        assert err.code == "STATUS_TRANSPORT_FAILED"
        assert err.retryable is True
        assert err.category == "transient"

    def test_malformed_response_is_contract(self) -> None:
        err = MalformedResponseError("abc123", "not json")
        assert err.code == "STATUS_BODY_MALFORMED"
        assert err.retryable is False
        assert err.category == "contract"


class TestValidationErrors:
    def test_config_validation_error(self) -> None:
        err = ConfigValidationError("MAX_POLL_ATTEMPTS", 0, "must be >= 1")
        assert isinstance(err, ValidationError)
        assert err.category == "validation"
        assert err.stage == "config"
        assert err.code == "CONFIG_VALIDATION_FAILED"
        assert err.key == "MAX_POLL_ATTEMPTS"
        assert err.value == 0
        assert err.reason == "must be >= 1"
        assert "MAX_POLL_ATTEMPTS=0" in err.message

    def test_model_validation_error(self) -> None:
        err = ModelValidationError("SessionSnapshot", "progress", 150, "too high")
        assert err.stage == "model_validation"
        assert err.code == "MODEL_VALIDATION_FAILED"
        assert err.category == "validation"
        assert isinstance(err, ValueError)
        assert isinstance(err, ValidationError)
