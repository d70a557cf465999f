"""LoggingMiddleware -- 请求级日志

每个请求绑定一个 ULID request_id（同时写入 X-Request-ID 响应头），
记录耗时；健康探测路径只记录失败响应。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

# 探测接口调用频繁，成功时不记日志
QUIET_PATHS = frozenset({"/health", "/ready"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = str(ULID())
        path = request.url.path
        quiet = path in QUIET_PATHS

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=path,
        )

        log = structlog.get_logger()
        started = time.monotonic()
        if not quiet:
            await log.ainfo("request_started")

        try:
            response = await call_next(request)
        except Exception as e:
            await log.aexception(
                "request_failed",
                duration_ms=int((time.monotonic() - started) * 1000),
                error_type=type(e).__name__,
            )
            raise

        if not quiet or response.status_code >= 400:
            await log.ainfo(
                "request_completed",
                status_code=response.status_code,
                duration_ms=int((time.monotonic() - started) * 1000),
            )

        response.headers["X-Request-ID"] = request_id
        return response
