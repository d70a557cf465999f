"""Provider 异常体系 + 失败分类

Provider 对外不抛异常（统一返回 ProviderResult），
这里的异常用于 Provider 内部传递失败，以及调用方 ProviderResult.unwrap() 时抛出。
"""

import socket
from enum import StrEnum

import httpx


class FailureKind(StrEnum):
    """失败原因分类"""

    # 鉴权类（保留原始 HTTP 状态码）
    INVALID_CREDENTIAL = "invalid_credential"
    PERMISSION_DENIED = "permission_denied"
    RATE_LIMITED = "rate_limited"
    CREDENTIAL_MISSING = "credential_missing"

    # 传输类
    NETWORK_UNREACHABLE = "network_unreachable"
    TIMEOUT = "timeout"
    CONNECTION_FAILED = "connection_failed"

    # 服务端类
    SERVER_ERROR = "server_error"
    HTTP_ERROR = "http_error"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_ENVELOPE = "malformed_envelope"


# HTTP 状态码 -> (失败分类, 提示文案)
_STATUS_KINDS: dict[int, tuple[FailureKind, str]] = {
    401: (FailureKind.INVALID_CREDENTIAL, "API Key 无效"),
    403: (FailureKind.PERMISSION_DENIED, "API Key 权限不足"),
    429: (FailureKind.RATE_LIMITED, "请求过于频繁"),
}


def classify_status(status_code: int) -> tuple[FailureKind, str]:
    """将非 2xx 状态码映射为失败分类与提示文案"""
    if status_code in _STATUS_KINDS:
        return _STATUS_KINDS[status_code]
    if status_code >= 500:
        return FailureKind.SERVER_ERROR, f"服务器错误: {status_code}"
    return FailureKind.HTTP_ERROR, f"请求失败: {status_code}"


def _caused_by_dns_failure(error: BaseException) -> bool:
    """沿异常链查找 DNS 解析失败"""
    current: BaseException | None = error
    while current is not None:
        if isinstance(current, socket.gaierror):
            return True
        current = current.__cause__ or current.__context__
    return False


def classify_transport_error(error: Exception) -> tuple[FailureKind, str]:
    """将连接层异常映射为失败分类与提示文案

    超时、主机不可达、连接被拒分别映射为不同分类。
    """
    if isinstance(error, (httpx.TimeoutException, TimeoutError)):
        return FailureKind.TIMEOUT, "请求超时，请稍后重试"
    if _caused_by_dns_failure(error):
        return FailureKind.NETWORK_UNREACHABLE, "无法连接服务器，请检查网络"
    if isinstance(error, (httpx.ConnectError, ConnectionError)):
        return FailureKind.CONNECTION_FAILED, "服务器连接失败"
    return FailureKind.CONNECTION_FAILED, "网络连接异常，请检查网络设置"


class ProviderError(Exception):
    """Provider 包基础异常"""

    def __init__(
        self,
        message: str,
        kind: FailureKind = FailureKind.SERVER_ERROR,
        status_code: int | None = None,
        recoverable: bool = True,
    ) -> None:
        """
        Args:
            message: 错误描述（可直接展示给用户）
            kind: 失败分类
            status_code: 原始 HTTP 状态码（如有）
            recoverable: 是否可通过调用方重试恢复
        """
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
        self.recoverable = recoverable


class ProviderHTTPError(ProviderError):
    """后端返回非 2xx 状态码"""

    def __init__(self, status_code: int, body: str = "") -> None:
        kind, hint = classify_status(status_code)
        detail = body.strip() if body else hint
        super().__init__(
            f"API 请求失败: {status_code} - {detail}",
            kind=kind,
            status_code=status_code,
            recoverable=kind in (FailureKind.RATE_LIMITED, FailureKind.SERVER_ERROR),
        )
        self.body = body


class ProviderUnreachableError(ProviderError):
    """后端不可达（连接失败、超时、DNS 解析失败等）"""

    def __init__(self, url: str, original_error: Exception) -> None:
        """
        Args:
            url: 尝试连接的地址
            original_error: 原始异常
        """
        kind, hint = classify_transport_error(original_error)
        super().__init__(hint, kind=kind, recoverable=True)
        self.url = url
        self.original_error = original_error


class CredentialMissingError(ProviderError):
    """未配置 API Key"""

    def __init__(self) -> None:
        super().__init__(
            "未配置 API Key，请先在设置中填写",
            kind=FailureKind.CREDENTIAL_MISSING,
            recoverable=False,
        )
