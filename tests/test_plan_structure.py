import pytest
from pydantic import ValidationError

from mesotracker.core.constants import MAX_SETS_PER_EXERCISE_PER_SESSION
from mesotracker.schemas.plan import WorkoutPlanCreate, parse_day_key
from mesotracker.services.template import day_template, parse_structure


def test_day_keys():
    assert parse_day_key("day3") == 3
    assert parse_day_key("Day12") == 12
    assert parse_day_key("2") == 2
    assert parse_day_key(4) == 4
    assert parse_day_key("day0") is None
    assert parse_day_key("monday") is None


def test_parse_structure_keeps_template_order_and_defaults():
    days = parse_structure(
        {
            "day1": [
                {"muscleGroup": "Back", "exercises": [{"name": "Row", "sets": 4, "reps": 10}, {"name": "Pull Up"}]},
                {"muscleGroup": "Chest", "exercises": [{"name": "Bench", "sets": 3, "reps": 8}]},
            ]
        }
    )
    day = days[1]
    assert [e.exercise_name for e in day.exercises] == ["Row", "Pull Up", "Bench"]
    assert day.muscle_groups() == ["Back", "Chest"]
    pull_up = day.exercises[1]
    assert (pull_up.default_sets, pull_up.default_reps) == (2, 8)
    assert [e.exercise_name for e in day.exercises_for("Back")] == ["Row", "Pull Up"]


def test_parse_structure_skips_malformed_entries():
    days = parse_structure(
        {
            "day1": [
                "nonsense",
                {"exercises": [{"name": "Orphan"}]},
                {"muscleGroup": "Chest", "exercises": [{"sets": 3}, {"name": "Bench", "sets": -2, "reps": "x"}]},
            ],
            "leg day": [{"muscleGroup": "Quads", "exercises": [{"name": "Squat"}]}],
            "day2": "not a list",
        }
    )
    assert list(days) == [1]
    (bench,) = days[1].exercises
    assert bench.exercise_name == "Bench"
    assert (bench.default_sets, bench.default_reps) == (2, 8)


def test_missing_day_is_empty():
    assert day_template({"day1": []}, 3).exercises == ()
    assert day_template(None, 1).exercises == ()


def _plan(structure, days_per_week=2):
    return {"name": "PPL", "duration_weeks": 5, "days_per_week": days_per_week, "structure": structure}


def test_plan_create_normalizes_keys():
    plan = WorkoutPlanCreate.model_validate(
        _plan({"1": [{"muscleGroup": "Chest", "exercises": [{"name": "Bench", "sets": 3, "reps": 8}]}]})
    )
    stored = plan.structure_json()
    assert list(stored) == ["day1"]
    assert stored["day1"][0]["muscleGroup"] == "Chest"
    assert stored["day1"][0]["exercises"][0] == {"name": "Bench", "sets": 3, "reps": 8}


@pytest.mark.parametrize(
    "structure",
    [
        {},
        {"day1": []},
        {"monday": [{"muscleGroup": "Chest", "exercises": [{"name": "Bench"}]}]},
        {"day3": [{"muscleGroup": "Chest", "exercises": [{"name": "Bench"}]}]},
        {"day1": [{"muscleGroup": "Chest", "exercises": []}]},
    ],
)
def test_plan_create_rejects_bad_structures(structure):
    with pytest.raises(ValidationError):
        WorkoutPlanCreate.model_validate(_plan(structure))


def test_stored_set_counts_are_capped_when_loaded():
    days = parse_structure({"day1": [{"muscleGroup": "Chest", "exercises": [{"name": "Bench", "sets": 30}]}]})
    assert days[1].exercises[0].default_sets == MAX_SETS_PER_EXERCISE_PER_SESSION


def test_plan_create_rejects_more_sets_than_a_session_allows():
    too_many = MAX_SETS_PER_EXERCISE_PER_SESSION + 1
    with pytest.raises(ValidationError):
        WorkoutPlanCreate.model_validate(
            _plan({"day1": [{"muscleGroup": "Chest", "exercises": [{"name": "Bench", "sets": too_many}]}]}, 1)
        )
