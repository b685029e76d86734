"""Tests for custom race locations, location templates and reordering."""

import pytest

from race_logger.operations.location_templates import CreateLocationTemplate, ReorderLocationTemplates
from race_logger.operations.race_locations import CreateRaceLocation, ReorderRaceLocations, parse_orders


@pytest.fixture
def locations(repos, race, templates) -> list:
    """The race's standard locations, copied from the sprint templates."""
    return repos.locations.copy_from_templates(race.id, templates)


@pytest.fixture
def create_location(repos) -> CreateRaceLocation:
    return CreateRaceLocation(repos.locations, repos.races)


def test_parse_orders() -> None:
    """Form values arrive as strings; anything non-numeric rejects the batch."""
    assert parse_orders({"3": "1", 4: 2}) == {3: 1, 4: 2}
    assert parse_orders({"3": "first"}) is None


class TestCreateRaceLocation:
    def test_appends_after_last_location(self, create_location, race, locations) -> None:
        result = create_location(race.id, {"name": "Ridge", "course_segment": "uphill1"})

        location = result.value
        assert location.display_order == 40
        assert location.segment_position == "middle"
        assert location.is_standard is False

    def test_first_location_of_empty_race(self, create_location, race) -> None:
        result = create_location(race.id, {"name": "Ridge", "course_segment": "uphill1"})
        assert result.value.display_order == 10

    def test_explicit_order_is_kept(self, repos, create_location, race, locations) -> None:
        create_location(race.id, {"name": "Ridge", "course_segment": "uphill1", "display_order": 15})
        names = [location.name for location in repos.locations.for_touch_selector(race.id)]
        assert names == ["Start", "Ridge", "Uphill 1 Top", "Finish"]

    def test_reserved_colour(self, create_location, race) -> None:
        result = create_location(race.id, {"name": "Ridge", "course_segment": "uphill1", "color_code": "blue"})
        assert result.errors == {"color_code": ["must be one of: green, red, yellow"]}

    def test_non_positive_order(self, create_location, race) -> None:
        result = create_location(race.id, {"name": "Ridge", "course_segment": "uphill1", "display_order": 0})
        assert result.errors == {"display_order": ["must be a positive integer"]}

    def test_unknown_race(self, repos, create_location) -> None:
        result = create_location(999, {"name": "Ridge", "course_segment": "uphill1"})
        assert result.errors == {"race_id": ["must be a valid race"]}
        assert repos.locations.count() == 0

    def test_unknown_segment(self, create_location, race) -> None:
        result = create_location(race.id, {"name": "Ridge", "course_segment": "chairlift"})
        assert result.code == "validation_failed"
        assert list(result.errors) == ["course_segment"]


class TestReorderRaceLocations:
    def test_applies_new_order(self, repos, race, locations) -> None:
        start, uphill, finish = locations
        result = ReorderRaceLocations(repos.locations)(race.id, {str(finish.id): "1", str(start.id): "2", str(uphill.id): "3"})

        assert [location.name for location in result.value] == ["Finish", "Start", "Uphill 1 Top"]

    def test_foreign_location_rolls_back_the_batch(self, repos, race, locations) -> None:
        other_race = repos.races.create(
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
        foreign = repos.locations.create(
            {"race_id": other_race.id, "name": "Start", "course_segment": "start_area", "segment_position": "full", "display_order": 10}
        )
        start, uphill, _ = locations

        result = ReorderRaceLocations(repos.locations)(race.id, {start.id: 50, uphill.id: 60, foreign.id: 1})

        assert result.code == "reorder_failed"
        assert [location.display_order for location in repos.locations.for_race(race.id)] == [10, 20, 30]
        assert repos.locations.find(foreign.id).display_order == 10

    def test_non_numeric_order(self, repos, race, locations) -> None:
        result = ReorderRaceLocations(repos.locations)(race.id, {locations[0].id: "top"})
        assert result.code == "invalid_order"

    def test_empty_order(self, repos, race) -> None:
        assert ReorderRaceLocations(repos.locations)(race.id, {}).value == []


class TestLocationTemplates:
    def test_create_defaults(self, repos, race_type, templates) -> None:
        create = CreateLocationTemplate(repos.templates, repos.race_types)
        result = create(race_type.id, {"name": "Ridge", "course_segment": "uphill2", "color_code": "", "description": ""})

        template = result.value
        assert template.display_order == 40
        assert template.color_code is None
        assert template.description is None
        assert template.is_standard is False
        assert template.segment_position == "middle"

    def test_create_for_unknown_race_type(self, repos) -> None:
        result = CreateLocationTemplate(repos.templates, repos.race_types)(999, {"name": "Ridge", "course_segment": "uphill2"})
        assert result.errors == {"race_type_id": ["race type not found"]}

    def test_reorder(self, repos, race_type, templates) -> None:
        start, uphill, finish = templates
        result = ReorderLocationTemplates(repos.templates)(race_type.id, {uphill.id: 5, start.id: 6, finish.id: 7})
        assert [template.name for template in result.value] == ["Uphill 1 Top", "Start", "Finish"]

    def test_reorder_unknown_template(self, repos, race_type, templates) -> None:
        result = ReorderLocationTemplates(repos.templates)(race_type.id, {templates[0].id: 5, 999: 6})
        assert result.code == "reorder_failed"
        assert repos.templates.find(templates[0].id).display_order == 10
