"""Outcome objects of the bulk athlete operations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AthleteImportResult:
    """Counts and per-row errors of a bulk athlete import.

    Attributes:
        total_count: Rows imported (one participation each)
        new_athletes_count: Imported rows that created an athlete
        existing_athletes_count: Imported rows that reused an athlete
        participations_created: Participations written
        errors: One message per rejected row
    """

    total_count: int
    new_athletes_count: int
    existing_athletes_count: int
    participations_created: int
    errors: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> AthleteImportResult:
        return cls(total_count=0, new_athletes_count=0, existing_athletes_count=0, participations_created=0)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def partial_success(self) -> bool:
        return bool(self.errors) and self.participations_created > 0

    @property
    def failed_count(self) -> int:
        return len(self.errors)

    def summary_message(self) -> str:
        plural = "" if self.total_count == 1 else "s"
        return (
            f"{self.total_count} athlete{plural} imported: "
            f"{self.new_athletes_count} new, {self.existing_athletes_count} existing"
        )


@dataclass(frozen=True)
class CopyParticipantsResult:
    """Participants copied between races, with the ones skipped and why."""

    copied_count: int
    skipped: tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        return self.copied_count > 0

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def summary_message(self) -> str:
        plural = "" if self.copied_count == 1 else "s"
        message = f"{self.copied_count} participant{plural} copied"
        if self.skipped:
            message += f", {len(self.skipped)} skipped"
        return message
