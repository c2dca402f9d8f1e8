"""Derived member states shown on both dashboards.

Background-check records keep their wire polarity (``status: true`` means a
flag was raised) only inside ``background_check_from_record``; everything
past that boundary uses ``CheckStatus``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping


class CheckStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class BackgroundCheck:
    status: CheckStatus
    novedades: list[str] = field(default_factory=list)
    code: str | None = None


def background_check_from_record(record: Mapping[str, Any] | None) -> BackgroundCheck:
    if not record:
        return BackgroundCheck(status=CheckStatus.PENDING)

    code = record.get("code")
    code = str(code) if code is not None else None
    flag = record.get("status")
    if flag is True:
        novedades = [str(item) for item in record.get("novedades") or []]
        return BackgroundCheck(status=CheckStatus.REJECTED, novedades=novedades, code=code)
    if flag is False:
        return BackgroundCheck(status=CheckStatus.APPROVED, code=code)
    return BackgroundCheck(status=CheckStatus.PENDING, code=code)


class DocumentState(str, Enum):
    TERMINATION = "termination"
    COMPLETE = "complete"
    SIGNED = "signed"
    PENDING = "pending"


def has_termination(ending: Mapping[str, Any] | None) -> bool:
    return bool(ending and ending.get("status"))


def document_state(
    documents_complete: bool,
    ending: Mapping[str, Any] | None,
    complete_state: DocumentState = DocumentState.COMPLETE,
) -> DocumentState:
    """Termination outranks completeness, which outranks pending."""
    if has_termination(ending):
        return DocumentState.TERMINATION
    if documents_complete:
        return complete_state
    return DocumentState.PENDING


def all_uploaded(urls: Iterable[str | None]) -> bool:
    """Every document has a URL. No documents at all counts as uploaded."""
    return all(urls)


@dataclass(frozen=True, slots=True)
class PhaseGates:
    precontractual_complete: bool
    signed: bool
    contractual_complete: bool

    @property
    def signature_unlocked(self) -> bool:
        return self.precontractual_complete

    @property
    def contractual_unlocked(self) -> bool:
        return self.precontractual_complete and self.signed
