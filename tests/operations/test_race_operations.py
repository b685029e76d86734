"""Tests for race use cases: creation with derived fields, edits, deletion."""

import pytest

from race_logger.domain.contracts.races import GENDER_CATEGORY_MESSAGE
from race_logger.operations.races import CreateRace, DeleteRace, PopulateLocations, UpdateRace
from race_logger.operations.result import Failure, Success


@pytest.fixture
def populate_locations(repos) -> PopulateLocations:
    return PopulateLocations(repos.templates, repos.locations)


@pytest.fixture
def create_race(repos, populate_locations) -> CreateRace:
    return CreateRace(repos.races, populate_locations, repos.competitions, repos.race_types)


@pytest.fixture
def params(competition, race_type) -> dict:
    """Valid parameters for a men's sprint final."""
    return {
        "competition_id": competition.id,
        "race_type_id": race_type.id,
        "name": "Men Sprint Final",
        "stage_type": "Final",
        "gender_category": "M",
        "scheduled_at": "2026-01-16T14:30:00Z",
    }


class TestCreateRace:
    def test_derives_stage_name_and_position(self, create_race, params) -> None:
        result = create_race(params)

        assert isinstance(result, Success)
        race = result.value
        assert race.stage_name == "Final"
        assert race.position == 0
        assert race.status == "scheduled"
        assert race.race_type_name == "Sprint"

    def test_position_follows_existing_races(self, create_race, params) -> None:
        create_race(params)
        second = create_race({**params, "name": "Men Sprint Heat 2", "stage_type": "Heat", "heat_number": 2})

        assert second.value.position == 1
        assert second.value.stage_name == "Heat 2"

    def test_populates_locations_from_templates(self, repos, create_race, params, templates) -> None:
        race = create_race(params).value
        assert [location.name for location in repos.locations.for_race(race.id)] == ["Start", "Uphill 1 Top", "Finish"]

    def test_race_is_created_without_templates(self, repos, create_race, params) -> None:
        """Missing templates are logged, not fatal."""
        result = create_race(params)
        assert result.success
        assert repos.locations.for_race(result.value.id) == []

    def test_invalid_attributes_write_nothing(self, repos, create_race, params) -> None:
        result = create_race({**params, "stage_type": "Finale", "gender_category": "X"})

        assert isinstance(result, Failure)
        assert result.code == "validation_failed"
        assert result.message == "Invalid attributes: gender_category, stage_type"
        assert result.errors["gender_category"] == [GENDER_CATEGORY_MESSAGE]
        assert repos.races.count() == 0

    def test_name_length(self, create_race, params) -> None:
        result = create_race({**params, "name": "ab"})
        assert result.errors == {"name": ["must be at least 3 characters"]}

    def test_heat_number_range(self, create_race, params) -> None:
        result = create_race({**params, "stage_type": "Heat", "heat_number": 11})
        assert result.errors == {"heat_number": ["must be between 1 and 10"]}

    def test_unknown_competition(self, create_race, params) -> None:
        result = create_race({**params, "competition_id": 999})
        assert result.errors == {"competition_id": ["competition not found"]}

    def test_missing_keys(self, create_race) -> None:
        result = create_race({})
        assert set(result.errors) == {"competition_id", "race_type_id", "name", "stage_type", "gender_category"}
        assert result.errors["name"] == ["is missing"]

    def test_broadcasts_race_and_locations(self, create_race, params, templates, broadcaster) -> None:
        broadcaster.clear()
        create_race(params)
        entities = [type(payload).__name__ for _, payload in broadcaster.events]
        assert entities == ["Race", "RaceLocation", "RaceLocation", "RaceLocation"]


class TestPopulateLocations:
    def test_no_templates(self, populate_locations, race, race_type) -> None:
        result = populate_locations(race.id, race_type.id)
        assert result.code == "no_templates"
        assert result.message == f"No location templates found for race type {race_type.id}"

    def test_copies_templates(self, populate_locations, race, race_type, templates) -> None:
        result = populate_locations(race.id, race_type.id)
        assert [location.display_order for location in result.value] == [10, 20, 30]
        assert all(location.race_id == race.id for location in result.value)


class TestUpdateRace:
    def test_not_found(self, repos) -> None:
        assert UpdateRace(repos.races)(999, {"name": "Renamed"}).code == "not_found"

    def test_stage_name_is_recomputed(self, repos, race) -> None:
        result = UpdateRace(repos.races)(race.id, {"stage_type": "Heat", "heat_number": 3})
        assert result.value.stage_name == "Heat 3"

    def test_heat_number_alone_keeps_stage_type(self, repos, race) -> None:
        result = UpdateRace(repos.races)(race.id, {"heat_number": 2})
        assert result.value.stage_name == "Qualification 2"

    def test_partial_update_keeps_other_fields(self, repos, race) -> None:
        result = UpdateRace(repos.races)(race.id, {"name": "Women Sprint Qualification A"})
        assert result.value.name == "Women Sprint Qualification A"
        assert result.value.stage_name == "Qualification"
        assert result.value.gender_category == "W"

    def test_invalid_status(self, repos, race) -> None:
        result = UpdateRace(repos.races)(race.id, {"status": "finished"})
        assert result.code == "validation_failed"
        assert "status" in result.errors

    def test_completed_race_is_frozen(self, repos, race) -> None:
        repos.races.update(race.id, {"status": "completed"})
        result = UpdateRace(repos.races)(race.id, {"name": "Renamed race"})
        assert result == Failure("completed", "Cannot edit completed races")


class TestDeleteRace:
    def test_deletes_with_locations(self, repos, race, templates) -> None:
        repos.locations.copy_from_templates(race.id, templates)

        assert DeleteRace(repos.races)(race.id) == Success(True)
        assert repos.races.find(race.id) is None
        assert repos.locations.for_race(race.id) == []

    def test_not_found(self, repos) -> None:
        assert DeleteRace(repos.races)(999).code == "not_found"
