"""Summaries of reconciliation runs."""

from dataclasses import dataclass, field

from .reconcile import Outcome, OutcomeStatus


@dataclass
class SyncSummary:
    inserted_count: int = 0
    updated_count: int = 0
    errors: list[str] = field(default_factory=list)
    first_external_link: str | None = None

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def message(self) -> str:
        text = f"Inserted {self.inserted_count}, updated {self.updated_count}, {self.error_count} failed."
        if self.errors:
            text += f" First error: {self.errors[0]}"
        return text

    def to_dict(self) -> dict:
        return {
            "inserted": self.inserted_count,
            "updated": self.updated_count,
            "errors": list(self.errors),
            "firstLink": self.first_external_link,
            "message": self.message,
        }


def summarize(outcomes: list[Outcome]) -> SyncSummary:
    """Fold outcomes into counts, error messages and the first event link."""
    summary = SyncSummary()
    for outcome in outcomes:
        if outcome.status is OutcomeStatus.INSERTED:
            summary.inserted_count += 1
        elif outcome.status is OutcomeStatus.UPDATED:
            summary.updated_count += 1
        else:
            summary.errors.append(outcome.message or "unknown error")
        if outcome.external_link and summary.first_external_link is None:
            summary.first_external_link = outcome.external_link
    return summary
