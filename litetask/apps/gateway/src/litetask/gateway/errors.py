"""统一错误响应 -- {"error": {"code", "message"}}"""

from litetask.provider import FailureKind, ProviderFailure
from starlette.responses import JSONResponse

# Provider 失败分类 -> HTTP 状态码（未列出的按 502 处理）
_FAILURE_STATUS: dict[FailureKind, int] = {
    FailureKind.CREDENTIAL_MISSING: 400,
    FailureKind.INVALID_CREDENTIAL: 401,
    FailureKind.PERMISSION_DENIED: 403,
    FailureKind.RATE_LIMITED: 429,
    FailureKind.TIMEOUT: 504,
}


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


def provider_failure_response(failure: ProviderFailure, **extra) -> JSONResponse:
    """将 ProviderFailure 转为错误响应，保留后端原始状态码"""
    content = {
        "error": {
            "code": failure.kind.value.upper(),
            "message": failure.message,
            "upstream_status": failure.status_code,
        },
        **extra,
    }
    return JSONResponse(
        status_code=_FAILURE_STATUS.get(failure.kind, 502),
        content=content,
    )


def task_not_found(task_id: int) -> JSONResponse:
    return error_response(404, "TASK_NOT_FOUND", f"Task with id {task_id} does not exist")
