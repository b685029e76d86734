"""Athlete registration use cases.

Both operations report partial success: every row is attempted, rows that
fail are listed with their reason and the rest are kept.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

from loguru import logger

from race_logger.db.repos import AthleteRepo, RaceParticipationRepo, RaceRepo
from race_logger.db.structs import AthleteImportResult, CopyParticipantsResult
from race_logger.domain.contracts import BulkImportAthletes, FailureKind
from race_logger.operations.result import Failure, OperationResult, Success


class BulkImport:
    """Import athletes into a race from JSON text or an already-decoded list.

    Duplicate bibs inside the payload are flagged by the contract but do not
    stop the import: the participation repository refuses the second row
    with a bib-specific message, so the first row is still imported.
    """

    def __init__(
        self,
        athlete_repo: AthleteRepo,
        participation_repo: RaceParticipationRepo,
        race_repo: RaceRepo | None = None,
    ):
        self.athlete_repo = athlete_repo
        self.participation_repo = participation_repo
        lookups = {"race": (lambda id: race_repo.exists(id=id))} if race_repo is not None else {}
        self.contract = BulkImportAthletes(lookups=lookups)

    def __call__(self, race_id: int, athletes: str | Sequence[Mapping[str, Any]]) -> OperationResult:
        if isinstance(athletes, (str, bytes)):
            try:
                athletes = json.loads(athletes)
            except json.JSONDecodeError as e:
                return Failure("invalid_json", f"Invalid JSON format: {e}")

        validation = self.contract.call({"race_id": race_id, "athletes": athletes})
        blocking = [item for item in validation.failures if item.kind is not FailureKind.CROSS_FIELD]
        if blocking:
            return Failure.from_validation(validation)
        for item in validation.failures:
            logger.warning(f"Athlete import into race {race_id}: {item.field} {item.message}")

        values = validation.to_dict()
        return self._process(values["race_id"], values["athletes"])

    def _process(self, race_id: int, rows: Sequence[Mapping[str, Any]]) -> OperationResult:
        new_athletes = 0
        existing_athletes = 0
        created = 0
        errors: list[str] = []

        for row in rows:
            error, was_new = self._import_row(race_id, row)
            if error is not None:
                errors.append(f"Bib {row.get('bib_number')} ({row.get('first_name')} {row.get('last_name')}): {error}")
                continue
            created += 1
            if was_new:
                new_athletes += 1
            else:
                existing_athletes += 1

        result = AthleteImportResult(
            total_count=created,
            new_athletes_count=new_athletes,
            existing_athletes_count=existing_athletes,
            participations_created=created,
            errors=tuple(errors),
        )
        logger.info(f"Athlete import into race {race_id}: {result.summary_message()}, {result.failed_count} failed")
        if errors:
            return Failure("import_errors", f"{len(errors)} of {len(rows)} athletes could not be imported", value=result)
        return Success(result)

    def _import_row(self, race_id: int, row: Mapping[str, Any]) -> tuple[str | None, bool]:
        """(error, athlete_created) for one row."""
        athlete, created = self.athlete_repo.find_or_create_by(
            first_name=row["first_name"],
            last_name=row["last_name"],
            gender=row["gender"],
            country=row["country"],
            license_number=row.get("license_number"),
        )
        if athlete is None:
            return "Athlete could not be saved", False

        registration = self.participation_repo.create_for_import(race_id, athlete.id, row["bib_number"])
        if not registration.ok:
            return registration.error, False
        return None, created


class CopyParticipants:
    """Register a source race's participants in a target race of the same gender category."""

    def __init__(self, race_repo: RaceRepo, participation_repo: RaceParticipationRepo):
        self.race_repo = race_repo
        self.participation_repo = participation_repo

    def __call__(self, target_race_id: int, source_race_id: int) -> OperationResult:
        target = self.race_repo.find(target_race_id)
        source = self.race_repo.find(source_race_id)
        if target is None:
            return Failure("not_found", "Target race not found")
        if source is None:
            return Failure("not_found", "Source race not found")
        if target.gender_category != source.gender_category:
            return Failure(
                "gender_mismatch",
                "Cannot copy participants: gender categories must match "
                f"(source: {source.gender_category_display()}, target: {target.gender_category_display()})",
            )

        participants = self.participation_repo.for_race(source_race_id)
        if not participants:
            return Failure("no_participants", "Source race has no participants to copy")

        copied = 0
        skipped: list[str] = []
        for participant in participants:
            error = self._copy(target_race_id, participant)
            if error is None:
                copied += 1
            else:
                skipped.append(f"Bib {participant.bib_display()}: {error}")

        result = CopyParticipantsResult(copied_count=copied, skipped=tuple(skipped))
        if not result.success:
            return Failure("nothing_copied", f"Failed to copy any participants: {', '.join(skipped)}", value=result)
        logger.info(f"Race {source_race_id} -> {target_race_id}: {result.summary_message()}")
        return Success(result)

    def _copy(self, target_race_id: int, participant: Any) -> str | None:
        if self.participation_repo.exists(race_id=target_race_id, bib_number=participant.bib_number):
            return "Bib number already taken"
        if self.participation_repo.exists(race_id=target_race_id, athlete_id=participant.athlete_id):
            return "Athlete already in race"
        result = self.participation_repo.try_create(
            {
                "race_id": target_race_id,
                "athlete_id": participant.athlete_id,
                "bib_number": participant.bib_number,
                "status": "registered",
                "active_in_heat": True,
            }
        )
        return result.error
