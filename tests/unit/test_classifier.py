"""Tests for the status classifier.

Each wire shape accepted by the results API maps to exactly one outcome;
loose response fields never leak past the classifier.
"""

from __future__ import annotations

import httpx
import pytest

from signal_scan.clients.base import MalformedResponseError, StatusTransportError
from signal_scan.core.constants import (
    DEFAULT_ERROR_MESSAGE,
    DEFAULT_FAILED_MESSAGE,
    UNEXPECTED_RESPONSE_MESSAGE,
)
from signal_scan.models.report import ReportPayload
from signal_scan.models.session import OutcomeKind, RawResponse
from signal_scan.poller.classifier import classify, classify_error, error_message_from
from tests.helpers import COMPLETE_BODY, json_response


class TestNotFound:
    def test_http_404(self) -> None:
        assert classify(json_response(404)).kind is OutcomeKind.NOT_FOUND

    def test_http_404_with_body(self) -> None:
        outcome = classify(json_response(404, {"error": "missing"}))
        assert outcome.kind is OutcomeKind.NOT_FOUND

    def test_status_field(self) -> None:
        outcome = classify(json_response(200, {"status": "not_found"}))
        assert outcome.kind is OutcomeKind.NOT_FOUND


class TestFailed:
    def test_http_500_with_message(self) -> None:
        outcome = classify(json_response(500, {"message": "Custom error message"}))
        assert outcome.kind is OutcomeKind.FAILED
        assert outcome.message == "Custom error message"

    def test_http_500_without_body_uses_default(self) -> None:
        outcome = classify(RawResponse(status_code=500, body=None, text="<html>oops</html>"))
        assert outcome.kind is OutcomeKind.FAILED
        assert outcome.message == DEFAULT_FAILED_MESSAGE

    def test_blank_message_uses_default(self) -> None:
        outcome = classify(json_response(200, {"status": "failed", "message": "  "}))
        assert outcome.message == DEFAULT_FAILED_MESSAGE

    def test_status_field_with_message(self) -> None:
        outcome = classify(json_response(200, {"status": "failed", "message": "LLM quota"}))
        assert outcome.kind is OutcomeKind.FAILED
        assert outcome.message == "LLM quota"


class TestPending:
    def test_http_202(self) -> None:
        assert classify(json_response(202)).kind is OutcomeKind.PENDING

    def test_status_field(self) -> None:
        assert classify(json_response(200, {"status": "pending"})).kind is OutcomeKind.PENDING

    def test_empty_body(self) -> None:
        assert classify(RawResponse(status_code=204)).kind is OutcomeKind.PENDING

    def test_done_marker_without_report(self) -> None:
        """A 'complete' status with no report body is still pending."""
        outcome = classify(json_response(200, {"status": "complete", "company": "Acme Inc"}))
        assert outcome.kind is OutcomeKind.PENDING

    def test_blank_report(self) -> None:
        outcome = classify(json_response(200, {"customer_report": "   "}))
        assert outcome.kind is OutcomeKind.PENDING


class TestSuccess:
    def test_complete_body(self) -> None:
        outcome = classify(json_response(200, COMPLETE_BODY))
        assert outcome.kind is OutcomeKind.SUCCESS
        assert isinstance(outcome.payload, ReportPayload)
        assert outcome.payload.company == "Acme Inc"
        assert outcome.payload.metadata.confidence_level == "High"

    def test_status_absent(self) -> None:
        body = {k: v for k, v in COMPLETE_BODY.items() if k != "status"}
        assert classify(json_response(200, body)).kind is OutcomeKind.SUCCESS

    @pytest.mark.parametrize("marker", ["completed", "done", "ready"])
    def test_other_done_markers(self, marker: str) -> None:
        body = {**COMPLETE_BODY, "status": marker}
        assert classify(json_response(200, body)).kind is OutcomeKind.SUCCESS


class TestUnexpected:
    def test_unrecognised_status(self) -> None:
        outcome = classify(json_response(200, {"status": "exploded", "customer_report": "x"}))
        assert outcome.kind is OutcomeKind.ERROR
        assert outcome.message == UNEXPECTED_RESPONSE_MESSAGE

    def test_non_object_body(self) -> None:
        outcome = classify(json_response(200, ["not", "an", "object"]))
        assert outcome.kind is OutcomeKind.ERROR
        assert outcome.message == UNEXPECTED_RESPONSE_MESSAGE

    def test_invalid_payload_shape(self) -> None:
        body = {**COMPLETE_BODY, "metadata": "high"}
        outcome = classify(json_response(200, body))
        assert outcome.kind is OutcomeKind.ERROR
        assert outcome.message == UNEXPECTED_RESPONSE_MESSAGE


class TestOtherNon2xx:
    def test_error_field(self) -> None:
        outcome = classify(json_response(400, {"error": "Bad identifier"}))
        assert outcome.kind is OutcomeKind.ERROR
        assert outcome.message == "Bad identifier"

    def test_message_field(self) -> None:
        outcome = classify(json_response(403, {"message": "Forbidden"}))
        assert outcome.message == "Forbidden"

    def test_errors_list(self) -> None:
        outcome = classify(json_response(422, {"errors": [{"message": "Invalid id"}]}))
        assert outcome.message == "Invalid id"

    def test_raw_text_fallback(self) -> None:
        outcome = classify(RawResponse(status_code=502, body=None, text="Bad Gateway"))
        assert outcome.message == "Bad Gateway"

    def test_generic_fallback(self) -> None:
        outcome = classify(RawResponse(status_code=503))
        assert outcome.kind is OutcomeKind.ERROR
        assert outcome.message == "Request failed with 503"

    def test_error_field_precedence(self) -> None:
        raw = json_response(400, {"error": "first", "message": "second"})
        assert error_message_from(raw) == "first"


class TestClassifyError:
    def test_transport_error_message(self) -> None:
        exc = StatusTransportError("abc123", "Could not reach the results service")
        outcome = classify_error(exc)
        assert outcome.kind is OutcomeKind.ERROR
        assert outcome.message == "Could not reach the results service"

    def test_malformed_body(self) -> None:
        outcome = classify_error(MalformedResponseError("abc123", "Malformed response body"))
        assert outcome.kind is OutcomeKind.ERROR
        assert outcome.category == "retryable"

    def test_plain_exception(self) -> None:
        outcome = classify_error(httpx.ConnectError("connection refused"))
        assert outcome.message == "connection refused"

    def test_empty_message_uses_default(self) -> None:
        outcome = classify_error(RuntimeError())
        assert outcome.message == DEFAULT_ERROR_MESSAGE


class TestBlankStatus:
    def test_blank_status_with_report_is_success(self) -> None:
        body = {**COMPLETE_BODY, "status": ""}
        assert classify(json_response(200, body)).kind is OutcomeKind.SUCCESS

    def test_whitespace_status_without_report_is_pending(self) -> None:
        outcome = classify(json_response(200, {"status": "  "}))
        assert outcome.kind is OutcomeKind.PENDING
