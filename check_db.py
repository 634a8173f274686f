import asyncio

from sqlalchemy import text

from mesotracker.db.session import async_session_maker, engine

TABLES = [
    "workout_plans",
    "active_cycles",
    "performance_records",
    "muscle_soreness",
    "pump_feedback",
    "workout_calendar",
    "completed_mesocycles",
    "personal_records",
]


async def check_data():
    async with async_session_maker() as session:
        print(f"Checking tables: {TABLES}")
        for table in TABLES:
            try:
                result = await session.execute(text(f"SELECT count(*) FROM {table}"))
                count = result.scalar()
                print(f"Table '{table}' row count: {count}")
                if count > 0:
                    sample = await session.execute(text(f"SELECT id FROM {table} LIMIT 1"))
                    sample_id = sample.scalar()
                    print(f"  Sample ID from {table}: {sample_id} (Type: {type(sample_id)})")
            except Exception as e:
                print(f"Error querying {table}: {e}")
                await session.rollback()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(check_data())
