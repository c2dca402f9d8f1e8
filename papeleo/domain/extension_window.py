from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from papeleo.domain.months import add_years
from papeleo.errors import DomainValidationError


@dataclass(frozen=True, slots=True)
class ExtensionWindowPolicy:
    """Where an extension of a member's contract may fall.

    - start_date <= end_date
    - the extension starts on or after the current contract end
    - the extension ends no later than one year after the contract start

    Contract dates may be unknown (None); the matching rule is then skipped.
    """

    contract_start: date | None
    contract_end: date | None

    @property
    def latest_end(self) -> date | None:
        if self.contract_start is None:
            return None
        return add_years(self.contract_start, 1)

    def validate(self, start_date: date, end_date: date) -> None:
        if start_date > end_date:
            raise DomainValidationError(
                f"Extension start date ({start_date}) cannot be after its end date ({end_date})"
            )
        if self.contract_end is not None and start_date < self.contract_end:
            raise DomainValidationError(
                f"Extension must start on or after the contract end date ({self.contract_end})"
            )
        latest_end = self.latest_end
        if latest_end is not None and end_date > latest_end:
            raise DomainValidationError(
                f"Extension cannot end after {latest_end} (one year from the contract start)"
            )
