from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class BackendError:
    message: str
    code: Optional[str] = None


@dataclass
class RepositoryResult(Generic[T]):
    """Backend response envelope: exactly one of data/error is meaningful."""
    data: Optional[T] = None
    error: Optional[BackendError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: Any = None) -> "RepositoryResult":
        return cls(data=data)

    @classmethod
    def failure(cls, message: str, code: Optional[str] = None) -> "RepositoryResult":
        return cls(error=BackendError(message=message, code=code))
