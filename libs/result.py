"""Result type for use case outcomes

Use cases return a Result instead of raising for expected business outcomes.
A Result holds either a value (ok) or an Error (err), never both.
"""

from typing import Any, Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class Error(BaseModel):
    """
    Structured error returned by a use case

    - code: machine-readable error code (e.g., INSUFFICIENT_STOCK)
    - message: human-readable message
    - reason: optional diagnostic detail
    - details: optional structured payload (e.g., per-item failures)
    """

    code: str
    message: str
    reason: Optional[str] = None
    details: Optional[Any] = None


class Result(Generic[T]):
    def __init__(self, value: Optional[T] = None, error: Optional[Error] = None):
        self._value = value
        self._error = error

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> T:
        if self._error is not None:
            raise ValueError(f"Result is an error: {self._error.code}")
        return self._value

    @property
    def error(self) -> Optional[Error]:
        return self._error

    def __repr__(self) -> str:
        if self.is_ok():
            return f"Result.ok({self._value!r})"
        return f"Result.err({self._error!r})"


class Return:
    @staticmethod
    def ok(value: Optional[T] = None) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result[Any]:
        return Result(error=error)
