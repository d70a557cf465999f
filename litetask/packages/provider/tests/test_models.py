"""ProviderResult / ProviderFailure / 失败分类 单元测试"""

import socket

import httpx
import pytest
from litetask.provider import (
    CredentialMissingError,
    FailureKind,
    ProviderError,
    ProviderFailure,
    ProviderHTTPError,
    ProviderResult,
    ProviderUnreachableError,
)
from litetask.provider.exceptions import classify_status, classify_transport_error


class TestProviderResult:
    def test_success(self):
        result = ProviderResult[bool].success(True)
        assert result.ok
        assert result.failure is None
        assert result.unwrap() is True

    def test_fail_from_error(self):
        result = ProviderResult[bool].fail(ProviderHTTPError(429, "slow down"))
        assert not result.ok
        assert result.value is None
        assert result.failure.kind == FailureKind.RATE_LIMITED
        assert result.failure.status_code == 429

    def test_unwrap_failure_raises(self):
        result = ProviderResult[bool].fail(CredentialMissingError())
        with pytest.raises(ProviderError) as exc_info:
            result.unwrap()
        assert exc_info.value.kind == FailureKind.CREDENTIAL_MISSING

    def test_failure_serialization(self):
        failure = ProviderFailure.from_error(ProviderHTTPError(401))
        data = failure.model_dump(mode="json")
        assert data["kind"] == "invalid_credential"
        assert data["status_code"] == 401
        assert "API Key 无效" in data["message"]


class TestClassifyStatus:
    @pytest.mark.parametrize(
        "status,kind,message",
        [
            (401, FailureKind.INVALID_CREDENTIAL, "API Key 无效"),
            (403, FailureKind.PERMISSION_DENIED, "API Key 权限不足"),
            (429, FailureKind.RATE_LIMITED, "请求过于频繁"),
            (500, FailureKind.SERVER_ERROR, "服务器错误: 500"),
            (404, FailureKind.HTTP_ERROR, "请求失败: 404"),
        ],
    )
    def test_mapping(self, status, kind, message):
        assert classify_status(status) == (kind, message)


class TestClassifyTransportError:
    def test_timeout(self):
        assert classify_transport_error(httpx.ReadTimeout("t"))[0] == FailureKind.TIMEOUT
        assert classify_transport_error(TimeoutError())[0] == FailureKind.TIMEOUT

    def test_connect_error(self):
        kind, _ = classify_transport_error(httpx.ConnectError("refused"))
        assert kind == FailureKind.CONNECTION_FAILED

    def test_dns_failure_in_cause_chain(self):
        error = httpx.ConnectError("dns")
        error.__cause__ = socket.gaierror(-2, "Name or service not known")
        assert classify_transport_error(error)[0] == FailureKind.NETWORK_UNREACHABLE

    def test_unreachable_error_keeps_url(self):
        original = httpx.ConnectError("refused")
        error = ProviderUnreachableError("https://example.invalid", original)
        assert error.url == "https://example.invalid"
        assert error.original_error is original
        assert error.recoverable is True

    def test_http_error_recoverability(self):
        assert ProviderHTTPError(503).recoverable is True
        assert ProviderHTTPError(401).recoverable is False
