"""Tagged success/failure values for operations whose steps fail independently."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err:
    error: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


@dataclass(slots=True)
class BatchReport:
    """Per-item outcome of a batch where one failure must not abort the rest."""

    created: list[Any] = field(default_factory=list)
    failed: list[dict[str, str]] = field(default_factory=list)

    def record(self, item: str, result: Result) -> None:
        if result.ok:
            self.created.append(result.value)
        else:
            self.failed.append({"item": item, "error": result.error})

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)
