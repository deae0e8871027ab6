"""Tests for RPC error payload detection and the error types."""

from __future__ import annotations

import pytest

from tezrpc.rpc.errors import (
    BootstrapError,
    HTTPStatusError,
    MalformedErrorPayloadError,
    RPCError,
    RPCErrorEntry,
    TezosError,
    TransportError,
    classify_rpc_errors,
)


class TestClassifyCompat:
    """Default mode: substring scan, then decode."""

    def test_no_error_substring(self) -> None:
        assert classify_rpc_errors(b'{"hash": "BLxyz", "level": 12}') is None

    def test_single_error(self) -> None:
        errors = classify_rpc_errors(b'[{"kind":"permanent","error":"boom"}]')
        assert errors == [RPCErrorEntry(kind="permanent", error="boom")]

    def test_multiple_errors_kept_in_order(self) -> None:
        body = b'[{"kind":"temporary","error":"first"},{"kind":"permanent","error":"second"}]'
        errors = classify_rpc_errors(body)
        assert [e.error for e in errors] == ["first", "second"]

    def test_missing_fields_default_to_empty(self) -> None:
        errors = classify_rpc_errors(b'[{"kind":"branch","id":"proto.error.counter_in_the_past"}]')
        assert errors == [RPCErrorEntry(kind="branch", error="")]

    def test_error_text_in_non_array_payload_is_malformed(self) -> None:
        body = b'{"metadata": {"operation_result": {"status": "error"}}}'
        with pytest.raises(MalformedErrorPayloadError) as excinfo:
            classify_rpc_errors(body)
        assert excinfo.value.body == body

    def test_invalid_json_is_malformed(self) -> None:
        with pytest.raises(MalformedErrorPayloadError) as excinfo:
            classify_rpc_errors(b"internal error")
        assert excinfo.value.__cause__ is not None

    def test_wrong_field_type_is_malformed(self) -> None:
        with pytest.raises(MalformedErrorPayloadError):
            classify_rpc_errors(b'[{"kind": 5, "error": "x"}]')


class TestClassifyStrict:
    """Strict mode: decode against the strict schema, no substring scan."""

    def test_error_payload(self) -> None:
        errors = classify_rpc_errors(b'[{"kind":"permanent","error":"boom"}]', strict=True)
        assert errors == [RPCErrorEntry(kind="permanent", error="boom")]

    def test_unrelated_error_text_is_ignored(self) -> None:
        body = b'{"metadata": {"operation_result": {"status": "error"}}}'
        assert classify_rpc_errors(body, strict=True) is None

    def test_undecodable_body_is_ignored(self) -> None:
        assert classify_rpc_errors(b"internal error", strict=True) is None

    def test_incomplete_entries_are_ignored(self) -> None:
        assert classify_rpc_errors(b'[{"kind":"branch"}]', strict=True) is None

    def test_empty_array_is_ignored(self) -> None:
        assert classify_rpc_errors(b"[]", strict=True) is None


class TestErrorTypes:
    def test_rpc_error_message_uses_first_entry(self) -> None:
        err = RPCError(
            [RPCErrorEntry("permanent", "boom"), RPCErrorEntry("temporary", "later")],
            body=b"raw",
        )
        assert str(err) == "rpc error (permanent): boom"
        assert err.kind == "permanent"
        assert err.error == "boom"
        assert len(err.errors) == 2
        assert err.body == b"raw"

    def test_http_status_error_message(self) -> None:
        err = HTTPStatusError(502, b"Bad Gateway")
        assert "502" in str(err)
        assert "Bad Gateway" in str(err)
        assert err.status_code == 502

    def test_bootstrap_error_names_step(self) -> None:
        cause = TransportError("failed to complete request: refused")
        err = BootstrapError("constants", cause)
        assert err.step == "constants"
        assert err.cause is cause
        assert "network constants" in str(err)
        assert "refused" in str(err)

    def test_exit_codes_are_distinct(self) -> None:
        codes = {cls.exit_code for cls in TezosError.__subclasses__()}
        assert len(codes) == len(TezosError.__subclasses__())
