"""Result type used by application use cases

Use cases never raise to their callers. They return either a value or an
Error describing why the operation failed.
"""

from typing import Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class Error(BaseModel):
    """Machine-readable failure description"""

    code: str
    message: str
    reason: Optional[str] = None


class Result(Generic[T]):
    """Outcome of a use case: holds either a value or an Error"""

    __slots__ = ("value", "error")

    def __init__(self, value: Optional[T] = None, error: Optional[Error] = None):
        self.value = value
        self.error = error

    def is_ok(self) -> bool:
        return self.error is None

    def is_err(self) -> bool:
        return self.error is not None

    def __repr__(self) -> str:
        if self.is_err():
            return f"Result(error={self.error!r})"
        return f"Result(value={self.value!r})"


class Return:
    """Constructors for Result"""

    @staticmethod
    def ok(value: T) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result:
        return Result(error=error)
