from conftest import CYCLE_ID, USER_ID, ScriptedPrompter, make_plan, make_record

from mesotracker.core.enums import SorenessLevel
from mesotracker.services.elicitation import elicit_soreness, soreness_queue
from mesotracker.services.template import day_template

THREE_DAY = {
    "day1": [{"muscleGroup": "Chest", "exercises": [{"name": "Bench"}]}],
    "day2": [{"muscleGroup": "Back", "exercises": [{"name": "Row"}]}],
    "day3": [
        {"muscleGroup": "Chest", "exercises": [{"name": "Incline"}]},
        {"muscleGroup": "Back", "exercises": [{"name": "Pulldown"}]},
        {"muscleGroup": "Quads", "exercises": [{"name": "Squat"}]},
    ],
}


async def test_week_one_day_one_never_prompts(store):
    plan = store.add_plan(make_plan(THREE_DAY, days_per_week=3))
    # even stray history must not trigger a prompt
    store.performance.append(make_record(plan, 1, 1, "Bench", "Chest", [8], [60], [7]))
    queue = await soreness_queue(store, USER_ID, plan.id, CYCLE_ID, day_template(plan.structure, 1), 1, 1)
    assert queue == []


async def test_week_one_prompts_for_groups_trained_earlier_that_week(store):
    plan = store.add_plan(make_plan(THREE_DAY, days_per_week=3))
    store.performance.append(make_record(plan, 1, 1, "Bench", "Chest", [8], [60], [7]))
    store.performance.append(make_record(plan, 1, 2, "Row", "Back", [10], [50], [7]))
    queue = await soreness_queue(store, USER_ID, plan.id, CYCLE_ID, day_template(plan.structure, 3), 1, 3)
    assert queue == ["Chest", "Back"]


async def test_later_weeks_prompt_for_anything_trained_before(store):
    plan = store.add_plan(make_plan(THREE_DAY, days_per_week=3))
    store.performance.append(make_record(plan, 1, 3, "Squat", "Quads", [8], [100], [7]))
    store.performance.append(make_record(plan, 2, 2, "Row", "Back", [10], [50], [8]))
    queue = await soreness_queue(store, USER_ID, plan.id, CYCLE_ID, day_template(plan.structure, 3), 3, 1)
    assert queue == ["Back", "Quads"]


async def test_history_failure_means_no_prompts(store):
    plan = store.add_plan(make_plan(THREE_DAY, days_per_week=3))
    store.failures.add("trained_muscle_groups")
    queue = await soreness_queue(store, USER_ID, plan.id, CYCLE_ID, day_template(plan.structure, 3), 2, 3)
    assert queue == []


async def test_answers_are_saved_one_by_one_in_order(store, today):
    prompter = ScriptedPrompter({"Chest": "none", "Back": "very_sore"})
    answers = await elicit_soreness(["Chest", "Back"], prompter, store, USER_ID, today, timeout=1)
    assert prompter.asked == ["Chest", "Back"]
    assert answers == {"Chest": SorenessLevel.NONE, "Back": SorenessLevel.VERY_SORE}
    assert [(r.muscle_group, r.soreness_level, r.healed) for r in store.soreness] == [
        ("Chest", "none", True),
        ("Back", "very_sore", False),
    ]


async def test_skipped_and_timed_out_prompts_are_left_out(store, today):
    prompter = ScriptedPrompter({"Chest": "hang", "Quads": "medium"})
    answers = await elicit_soreness(["Chest", "Back", "Quads"], prompter, store, USER_ID, today, timeout=0.05)
    assert prompter.asked == ["Chest", "Back", "Quads"]
    assert answers == {"Quads": SorenessLevel.MEDIUM}
    assert [r.muscle_group for r in store.soreness] == ["Quads"]


async def test_save_failure_keeps_the_answer_and_continues(store, today):
    store.failures.add("add_soreness")
    prompter = ScriptedPrompter({"Chest": "medium", "Back": "none"})
    answers = await elicit_soreness(["Chest", "Back"], prompter, store, USER_ID, today, timeout=1)
    assert answers == {"Chest": SorenessLevel.MEDIUM, "Back": SorenessLevel.NONE}
