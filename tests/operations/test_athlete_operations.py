"""Tests for bulk athlete import and copying participants between races."""

import json

import pytest

from race_logger.db.structs import AthleteImportResult, CopyParticipantsResult
from race_logger.operations.athletes import BulkImport, CopyParticipants
from race_logger.operations.result import Failure, Success

ROWS = [
    {"bib_number": 7, "first_name": "Anna", "last_name": "Rossi", "gender": "F", "country": "ITA"},
    {"bib_number": 8, "first_name": "Lea", "last_name": "Meier", "gender": "F", "country": "CHE", "license_number": "SUI-44"},
    {"bib_number": 9, "first_name": "Emma", "last_name": "Blanc", "gender": "F", "country": "FRA"},
]


@pytest.fixture
def bulk_import(repos) -> BulkImport:
    return BulkImport(repos.athletes, repos.participations, repos.races)


@pytest.fixture
def final(repos, race):
    """Second women's race of the same competition and race type."""
    return repos.races.create(
        {
            "competition_id": race.competition_id,
            "race_type_id": race.race_type_id,
            "name": "Women Sprint Final",
            "stage_type": "Final",
            "stage_name": "Final",
            "gender_category": "W",
            "position": 1,
        }
    )


class TestBulkImport:
    def test_imports_every_row(self, repos, bulk_import, race) -> None:
        result = bulk_import(race.id, ROWS)

        assert isinstance(result, Success)
        assert result.value == AthleteImportResult(
            total_count=3, new_athletes_count=3, existing_athletes_count=0, participations_created=3
        )
        assert [p.display_name() for p in repos.participations.for_race(race.id)] == [
            "007 - Anna Rossi",
            "008 - Lea Meier",
            "009 - Emma Blanc",
        ]
        assert repos.athletes.find_by_license("SUI-44") is not None

    def test_accepts_json_text(self, bulk_import, race) -> None:
        result = bulk_import(race.id, json.dumps(ROWS[:1]))
        assert result.value.total_count == 1

    def test_reuses_existing_athletes(self, bulk_import, race, athlete) -> None:
        result = bulk_import(race.id, ROWS[:2])
        assert result.value.new_athletes_count == 1
        assert result.value.existing_athletes_count == 1
        assert result.value.summary_message() == "2 athletes imported: 1 new, 1 existing"

    def test_duplicate_bib_keeps_the_first_row(self, repos, bulk_import, race) -> None:
        """A bib repeated inside the payload imports once and reports the repeat."""
        rows = [ROWS[0], {**ROWS[1], "bib_number": 7}]

        result = bulk_import(race.id, rows)

        assert isinstance(result, Failure)
        assert result.code == "import_errors"
        assert result.message == "1 of 2 athletes could not be imported"
        assert result.value.participations_created == 1
        assert result.value.partial_success
        assert result.value.errors == ("Bib 7 (Lea Meier): Bib number 7 already assigned",)
        assert [p.athlete_name for p in repos.participations.for_race(race.id)] == ["Anna Rossi"]

    def test_athlete_already_in_race(self, repos, bulk_import, race, athlete) -> None:
        repos.participations.create_for_import(race.id, athlete.id, 1)
        result = bulk_import(race.id, ROWS[:1])
        assert result.value.errors == ("Bib 7 (Anna Rossi): Athlete already assigned to this race",)

    def test_invalid_json(self, bulk_import, race) -> None:
        result = bulk_import(race.id, "[{not json")
        assert result.code == "invalid_json"
        assert result.message.startswith("Invalid JSON format: ")

    def test_malformed_row_blocks_the_whole_import(self, repos, bulk_import, race) -> None:
        rows = [ROWS[0], {**ROWS[1], "gender": "X", "country": "SUI"}]

        result = bulk_import(race.id, rows)

        assert result.code == "validation_failed"
        assert result.errors["athletes.1.gender"] == ["must be 'M' or 'F'"]
        assert result.errors["athletes.1.country"] == ["'SUI' is not a valid ISMF country code"]
        assert repos.participations.count() == 0

    def test_empty_payload(self, bulk_import, race) -> None:
        assert bulk_import(race.id, []).errors == {"athletes": ["must contain at least one athlete"]}

    def test_not_an_array(self, bulk_import, race) -> None:
        assert bulk_import(race.id, '{"bib_number": 7}').errors == {"athletes": ["must be an array"]}

    def test_unknown_race(self, bulk_import) -> None:
        assert bulk_import(999, ROWS).errors == {"race_id": ["race not found"]}


class TestCopyParticipants:
    @pytest.fixture
    def copy(self, repos) -> CopyParticipants:
        return CopyParticipants(repos.races, repos.participations)

    @pytest.fixture
    def registered(self, bulk_import, race):
        """The qualification race with three registered athletes."""
        bulk_import(race.id, ROWS)
        return race

    def test_copies_everyone(self, repos, copy, registered, final) -> None:
        result = copy(final.id, registered.id)

        assert result == Success(CopyParticipantsResult(copied_count=3))
        assert [p.bib_number for p in repos.participations.for_race(final.id)] == [7, 8, 9]
        assert {p.status for p in repos.participations.for_race(final.id)} == {"registered"}

    def test_taken_bib_is_skipped(self, repos, copy, registered, final) -> None:
        other = repos.athletes.create({"first_name": "Zoe", "last_name": "Keller", "gender": "F", "country": "CHE"})
        repos.participations.create_for_import(final.id, other.id, 7)

        result = copy(final.id, registered.id)

        assert result.value.copied_count == 2
        assert result.value.skipped == ("Bib 007: Bib number already taken",)
        assert result.value.summary_message() == "2 participants copied, 1 skipped"

    def test_copying_twice_copies_nothing(self, copy, registered, final) -> None:
        copy(final.id, registered.id)
        result = copy(final.id, registered.id)

        assert result.code == "nothing_copied"
        assert result.value.copied_count == 0
        assert result.value.skipped_count == 3

    def test_gender_mismatch(self, repos, copy, registered) -> None:
        men = repos.races.create(
            {
                "competition_id": registered.competition_id,
                "race_type_id": registered.race_type_id,
                "name": "Men Sprint Final",
                "stage_type": "Final",
                "stage_name": "Final",
                "gender_category": "M",
                "position": 2,
            }
        )
        result = copy(men.id, registered.id)
        assert result.code == "gender_mismatch"
        assert result.message.endswith("(source: Women, target: Men)")

    def test_empty_source(self, copy, race, final) -> None:
        assert copy(final.id, race.id).code == "no_participants"

    def test_missing_races(self, copy, race) -> None:
        assert copy(999, race.id) == Failure("not_found", "Target race not found")
        assert copy(race.id, 999) == Failure("not_found", "Source race not found")
