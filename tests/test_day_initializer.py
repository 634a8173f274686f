import pytest
from conftest import CYCLE_ID, USER_ID, ScriptedPrompter, make_plan, make_record

from mesotracker.core.enums import SorenessLevel
from mesotracker.models.feedback import PumpRecord
from mesotracker.services.day_initializer import DayInitializer
from mesotracker.services.template import day_template

REPEATED_LIFT = {
    "day1": [{"muscleGroup": "Chest", "exercises": [{"name": "Bench Press", "sets": 2, "reps": 10}]}],
    "day2": [
        {"muscleGroup": "Chest", "exercises": [{"name": "Bench Press", "sets": 2, "reps": 6}, {"name": "Fly", "sets": 2, "reps": 12}]}
    ],
}


@pytest.fixture
def initializer(store):
    return DayInitializer(store, weekly_set_ceiling=21, prompt_timeout=1)


def assert_aligned(entries):
    for e in entries:
        n = e.current_sets
        assert len(e.actual_reps) == len(e.weights) == len(e.prefilled_weights) == n
        assert len(e.intensity) == len(e.expected_reps) == n


async def test_week_one_is_baseline_regardless_of_history(store, plan, initializer):
    store.performance.append(make_record(plan, 1, 1, "Bench Press", "Chest", [12, 12, 12], [80, 80, 80], [9, 9, 9]))
    result = await initializer.compute(USER_ID, plan, CYCLE_ID, day_template(plan.structure, 2), 1, 2, {})
    assert result.entries
    for e in result.entries:
        assert all(r == 0 for r in e.actual_reps)
        assert all(w == 0 for w in e.weights)
        assert all(i == 7 for i in e.intensity)
        assert e.expected_reps == [e.planned_reps] * e.current_sets
    assert result.adjustments == []


async def test_expected_reps_follow_last_week(store, plan, initializer):
    store.performance.append(make_record(plan, 2, 1, "Bench Press", "Chest", [8, 8, 7], [60, 60, 57.5], [8, 8, 9]))
    result = await initializer.compute(USER_ID, plan, CYCLE_ID, day_template(plan.structure, 1), 3, 1, {})
    bench = result.entries[0]
    assert bench.exercise_name == "Bench Press"
    assert bench.intensity == [8, 8, 9]
    # 8+(8-8), 8+(8-8), 7+(9-9)
    assert bench.expected_reps == [8, 8, 7]
    assert bench.weights == [60, 60, 57.5]
    assert bench.prefilled_weights == bench.weights
    assert bench.actual_reps == [0, 0, 0]


async def test_exercise_without_history_uses_template_defaults(store, plan, initializer):
    result = await initializer.compute(USER_ID, plan, CYCLE_ID, day_template(plan.structure, 1), 2, 1, {})
    row = next(e for e in result.entries if e.exercise_name == "Barbell Row")
    assert row.current_sets == 2
    assert row.expected_reps == [10, 10]
    assert row.intensity == [7, 7]


async def test_deload_week_scales_sets_and_reps_from_best_set(store, initializer):
    structure = {"day1": [{"muscleGroup": "Quads", "exercises": [{"name": "Squat", "sets": 6, "reps": 10}]}]}
    plan = store.add_plan(make_plan(structure, duration_weeks=6, days_per_week=1))
    store.performance.append(
        make_record(plan, 5, 1, "Squat", "Quads", [12, 10, 10, 9, 9, 8], [100] * 6, [9, 9, 9, 9, 9, 10])
    )
    result = await initializer.compute(
        USER_ID, plan, CYCLE_ID, day_template(plan.structure, 1), 6, 1, {"Quads": SorenessLevel.NONE}
    )
    (squat,) = result.entries
    assert result.is_deload
    assert squat.current_sets == 2
    assert squat.expected_reps == [4, 4]
    assert squat.intensity == [7, 7]
    assert squat.weights == [100, 100]
    # no volume changes in the deload week
    assert result.adjustments == []


async def test_deload_without_history_scales_template(store, initializer):
    structure = {"day1": [{"muscleGroup": "Quads", "exercises": [{"name": "Squat", "sets": 6, "reps": 12}]}]}
    plan = store.add_plan(make_plan(structure, duration_weeks=4, days_per_week=1))
    result = await initializer.compute(USER_ID, plan, CYCLE_ID, day_template(plan.structure, 1), 4, 1, {})
    (squat,) = result.entries
    assert (squat.current_sets, squat.expected_reps) == (2, [4, 4])


async def test_same_day_index_is_preferred_for_repeated_lifts(store, initializer):
    plan = store.add_plan(make_plan(REPEATED_LIFT, duration_weeks=5, days_per_week=2))
    store.performance.append(make_record(plan, 2, 1, "Bench Press", "Chest", [10, 10], [70, 70], [8, 9]))
    store.performance.append(make_record(plan, 2, 2, "Bench Press", "Chest", [6, 6], [85, 85], [8, 9]))

    day1 = await initializer.compute(USER_ID, plan, CYCLE_ID, day_template(plan.structure, 1), 3, 1, {})
    assert day1.entries[0].expected_reps == [10, 10]
    assert day1.entries[0].weights == [70, 70]

    day2 = await initializer.compute(USER_ID, plan, CYCLE_ID, day_template(plan.structure, 2), 3, 2, {})
    assert day2.entries[0].expected_reps == [6, 6]
    assert day2.entries[0].weights == [85, 85]


async def test_falls_back_to_most_recent_other_day(store, initializer):
    plan = store.add_plan(make_plan(REPEATED_LIFT, duration_weeks=5, days_per_week=2))
    store.performance.append(make_record(plan, 1, 2, "Bench Press", "Chest", [5, 5], [90, 90], [7, 7]))
    result = await initializer.compute(USER_ID, plan, CYCLE_ID, day_template(plan.structure, 1), 2, 1, {})
    bench = result.entries[0]
    # week 2 targets [8, 9] from RPE 7 -> +1, +2
    assert bench.expected_reps == [6, 7]
    assert bench.weights == [90, 90]


async def test_history_lookup_failure_degrades_to_defaults(store, plan, initializer):
    store.performance.append(make_record(plan, 2, 1, "Bench Press", "Chest", [8, 8, 7], [60, 60, 60], [8, 8, 9]))
    store.failures.add("performance_history")
    result = await initializer.compute(USER_ID, plan, CYCLE_ID, day_template(plan.structure, 1), 3, 1, {})
    bench = result.entries[0]
    assert bench.expected_reps == [8, 8, 8]
    assert bench.weights == [0.0, 0.0, 0.0]


async def test_fresh_muscle_with_great_pump_gets_one_more_set(store, plan, initializer, today):
    store.performance.append(make_record(plan, 2, 1, "Bench Press", "Chest", [8, 8, 7], [60, 60, 60], [8, 8, 9]))
    store.pumps.append(PumpRecord(user_id=USER_ID, workout_date=today, muscle_group="Chest", pump_level="amazing"))
    result = await initializer.compute(
        USER_ID, plan, CYCLE_ID, day_template(plan.structure, 1), 3, 1, {"Chest": SorenessLevel.NONE}
    )
    bench = result.entries[0]
    assert bench.current_sets == 4
    assert bench.intensity == [8, 8, 9, 9]
    assert result.adjustments[0].applied == 1
    assert_aligned(result.entries)


async def test_very_sore_group_keeps_volume_and_extremely_sore_loses_a_set(store, plan, initializer):
    result = await initializer.compute(
        USER_ID,
        plan,
        CYCLE_ID,
        day_template(plan.structure, 1),
        2,
        1,
        {"Chest": SorenessLevel.VERY_SORE, "Back": SorenessLevel.EXTREMELY_SORE},
    )
    by_name = {e.exercise_name: e for e in result.entries}
    assert by_name["Bench Press"].current_sets == 3
    # Pull Up (3 sets) is the biggest back exercise
    assert by_name["Pull Up"].current_sets == 2
    assert by_name["Barbell Row"].current_sets == 2
    assert_aligned(result.entries)


async def test_weekly_ceiling_turns_increase_into_notice(store, plan, initializer):
    store.performance.append(make_record(plan, 3, 1, "Bench Press", "Chest", [8] * 18, [60] * 18, [8] * 18))
    result = await initializer.compute(
        USER_ID, plan, CYCLE_ID, day_template(plan.structure, 2), 3, 2, {"Chest": SorenessLevel.NONE}
    )
    incline = next(e for e in result.entries if e.exercise_name == "Incline Press")
    assert incline.current_sets == 2
    assert len(result.notices) == 1
    assert "Chest" in result.notices[0]


async def test_pump_lookup_failure_assumes_medium(store, plan, initializer):
    store.failures.add("latest_pump")
    result = await initializer.compute(
        USER_ID, plan, CYCLE_ID, day_template(plan.structure, 2), 2, 2, {"Quads": SorenessLevel.NONE}
    )
    squat = next(e for e in result.entries if e.exercise_name == "Back Squat")
    assert squat.current_sets == 5


async def test_prepare_asks_then_adjusts(store, plan, initializer, today):
    store.performance.append(make_record(plan, 1, 1, "Bench Press", "Chest", [8, 8, 8], [60, 60, 60], [7, 7, 7]))
    store.performance.append(make_record(plan, 1, 2, "Back Squat", "Quads", [6, 6, 6], [100, 100, 100], [7, 7, 7]))
    prompter = ScriptedPrompter({"Chest": "medium"})
    result = await initializer.prepare(
        USER_ID, plan, CYCLE_ID, day_template(plan.structure, 2), 2, 2, prompter, today
    )
    assert prompter.asked == ["Chest", "Quads"]
    assert result.soreness == {"Chest": SorenessLevel.MEDIUM}
    incline = next(e for e in result.entries if e.exercise_name == "Incline Press")
    squat = next(e for e in result.entries if e.exercise_name == "Back Squat")
    assert incline.current_sets == 3
    assert squat.current_sets == 3
    assert [r.muscle_group for r in store.soreness] == ["Chest"]
