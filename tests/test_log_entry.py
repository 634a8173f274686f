import pytest

from mesotracker.schemas.plan import ExerciseTemplate
from mesotracker.services.log_entry import WorkoutLogEntry

BENCH = ExerciseTemplate(exercise_name="Bench Press", muscle_group="Chest", default_sets=3, default_reps=8)


def assert_aligned(e: WorkoutLogEntry) -> None:
    n = e.current_sets
    assert len(e.actual_reps) == len(e.weights) == len(e.prefilled_weights) == n
    assert len(e.intensity) == len(e.expected_reps) == n


def test_baseline_is_zeroed_at_rpe_seven():
    e = WorkoutLogEntry.baseline(BENCH)
    assert e.current_sets == 3
    assert e.actual_reps == [0, 0, 0]
    assert e.weights == [0.0, 0.0, 0.0]
    assert e.expected_reps == [8, 8, 8]
    assert e.intensity == [7, 7, 7]


def test_added_set_targets_its_position_and_copies_last_weight():
    e = WorkoutLogEntry(
        exercise_name="Bench Press",
        muscle_group="Chest",
        planned_sets=2,
        planned_reps=8,
        current_sets=2,
        expected_reps=[10, 9],
        actual_reps=[0, 0],
        weights=[60.0, 62.5],
        prefilled_weights=[60.0, 62.5],
        intensity=[8, 9],
    )
    e.add_sets(1, week=4, duration_weeks=6)
    assert e.current_sets == 3
    # new last set in week 4 targets 10; best set is 10 reps at RPE 8
    assert e.intensity[-1] == 10
    assert e.expected_reps[-1] == 12
    assert e.weights[-1] == 62.5
    assert e.actual_reps[-1] == 0
    assert_aligned(e)


def test_remove_sets_keeps_one():
    e = WorkoutLogEntry.baseline(BENCH)
    assert e.remove_sets(5) == 2
    assert e.current_sets == 1
    assert_aligned(e)


def test_integrity_pads_and_truncates():
    e = WorkoutLogEntry.baseline(BENCH)
    e.intensity = [8]
    e.actual_reps = [5, 5, 5, 5]
    e.ensure_array_integrity()
    assert e.intensity == [8, 8, 8]
    assert e.actual_reps == [5, 5, 5]
    assert_aligned(e)


def test_weight_confirmation_only_after_week_one():
    e = WorkoutLogEntry.baseline(BENCH)
    e.prefilled_weights = [60.0, 60.0, 60.0]
    assert not e.weight_change_needs_confirmation(0, 80.0, week=1, epsilon=0.1)
    assert e.weight_change_needs_confirmation(0, 80.0, week=2, epsilon=0.1)
    assert not e.weight_change_needs_confirmation(0, 60.05, week=2, epsilon=0.1)


def test_intensity_is_editable_in_week_one_only():
    e = WorkoutLogEntry.baseline(BENCH)
    e.set_intensity(0, 9, week=1)
    assert e.intensity[0] == 9
    with pytest.raises(ValueError):
        e.set_intensity(0, 9, week=2)
    with pytest.raises(ValueError):
        e.set_intensity(0, 11, week=1)


def test_completion_needs_reps_and_weights():
    e = WorkoutLogEntry.baseline(BENCH)
    assert not e.is_complete(week=1)
    for i in range(3):
        e.set_reps(i, 8)
        e.set_weight(i, 60.0)
    assert e.refresh_completed(week=1)
    e.set_weight(1, None)
    assert not e.is_complete(week=2)


def test_set_index_out_of_range():
    e = WorkoutLogEntry.baseline(BENCH)
    with pytest.raises(ValueError):
        e.set_reps(3, 8)
