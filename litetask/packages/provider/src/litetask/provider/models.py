"""数据模型 -- ProviderFailure + ProviderResult

所有 Provider 操作统一返回 ProviderResult：成功携带 value，失败携带 ProviderFailure。
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from .exceptions import FailureKind, ProviderError

T = TypeVar("T")


class ProviderFailure(BaseModel):
    """类型化失败原因"""

    kind: FailureKind = Field(description="失败分类")
    message: str = Field(description="可直接展示给用户的原因文本")
    status_code: int | None = Field(default=None, description="原始 HTTP 状态码")

    @classmethod
    def from_error(cls, error: ProviderError) -> "ProviderFailure":
        return cls(kind=error.kind, message=str(error), status_code=error.status_code)


class ProviderResult(BaseModel, Generic[T]):
    """Provider 调用结果"""

    value: T | None = None
    failure: ProviderFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "ProviderResult[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: ProviderError | ProviderFailure) -> "ProviderResult[T]":
        if isinstance(error, ProviderError):
            error = ProviderFailure.from_error(error)
        return cls(failure=error)

    def unwrap(self) -> T:
        """取出成功值；失败时抛出 ProviderError"""
        if self.failure is not None:
            raise ProviderError(
                self.failure.message,
                kind=self.failure.kind,
                status_code=self.failure.status_code,
            )
        return self.value
