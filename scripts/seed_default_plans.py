"""Insert the built-in plans (user_id NULL) if they are missing."""

import asyncio

from sqlalchemy import select

from mesotracker.db.session import async_session_maker, engine
from mesotracker.models.plan import WorkoutPlan
from mesotracker.schemas.plan import WorkoutPlanCreate

DEFAULT_PLANS = [
    {
        "name": "Upper / Lower (4 weeks)",
        "duration_weeks": 4,
        "days_per_week": 4,
        "structure": {
            "day1": [
                {"muscleGroup": "Chest", "exercises": [{"name": "Bench Press", "sets": 3, "reps": 8}]},
                {"muscleGroup": "Back", "exercises": [{"name": "Barbell Row", "sets": 3, "reps": 10}]},
            ],
            "day2": [
                {"muscleGroup": "Quads", "exercises": [{"name": "Back Squat", "sets": 3, "reps": 8}]},
                {"muscleGroup": "Hamstrings", "exercises": [{"name": "Romanian Deadlift", "sets": 2, "reps": 10}]},
            ],
            "day3": [
                {"muscleGroup": "Chest", "exercises": [{"name": "Incline Dumbbell Press", "sets": 3, "reps": 10}]},
                {"muscleGroup": "Shoulders", "exercises": [{"name": "Lateral Raise", "sets": 3, "reps": 15}]},
            ],
            "day4": [
                {"muscleGroup": "Quads", "exercises": [{"name": "Leg Press", "sets": 3, "reps": 12}]},
                {"muscleGroup": "Calves", "exercises": [{"name": "Standing Calf Raise", "sets": 3, "reps": 12}]},
            ],
        },
    },
    {
        "name": "Full Body (6 weeks)",
        "duration_weeks": 6,
        "days_per_week": 3,
        "structure": {
            f"day{d}": [
                {"muscleGroup": "Chest", "exercises": [{"name": "Bench Press", "sets": 2, "reps": 8}]},
                {"muscleGroup": "Back", "exercises": [{"name": "Lat Pulldown", "sets": 2, "reps": 10}]},
                {"muscleGroup": "Quads", "exercises": [{"name": "Back Squat", "sets": 2, "reps": 8}]},
            ]
            for d in (1, 2, 3)
        },
    },
]


async def main():
    async with async_session_maker() as db:
        for raw in DEFAULT_PLANS:
            plan_in = WorkoutPlanCreate.model_validate(raw)
            existing = await db.execute(
                select(WorkoutPlan.id).where(WorkoutPlan.user_id.is_(None), WorkoutPlan.name == plan_in.name)
            )
            if existing.scalar_one_or_none():
                print(f"Plan '{plan_in.name}' already exists.")
                continue
            db.add(
                WorkoutPlan(
                    user_id=None,
                    name=plan_in.name,
                    program_type=plan_in.program_type,
                    duration_weeks=plan_in.duration_weeks,
                    days_per_week=plan_in.days_per_week,
                    structure=plan_in.structure_json(),
                )
            )
            print(f"Added plan '{plan_in.name}'.")
        await db.commit()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
