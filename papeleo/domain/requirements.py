from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol


class Requirement(Protocol):
    id: str


@dataclass(frozen=True, slots=True)
class PlannedDocument:
    required_document_id: str
    month: str


def plan_contractual_documents(
    required_documents: Iterable[Requirement],
    months: Iterable[str],
    existing_pairs: Iterable[tuple[str, str | None]] = (),
) -> list[PlannedDocument]:
    """Missing (requirement x month) placeholder rows, month-major.

    Pairs already in ``existing_pairs`` are never planned again, so repeated
    calls with the same inputs plan nothing new.
    """
    required_documents = list(required_documents)
    existing = set(existing_pairs)
    planned = []
    for month in months:
        for required in required_documents:
            if (required.id, month) in existing:
                continue
            existing.add((required.id, month))
            planned.append(PlannedDocument(required_document_id=required.id, month=month))
    return planned
