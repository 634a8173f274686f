"""Soreness check (SC) elicitation: which muscle groups to ask about, and asking them in order."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import date
from typing import Protocol

from mesotracker.core.enums import SorenessLevel
from mesotracker.models.feedback import SorenessRecord
from mesotracker.schemas.plan import DayTemplate
from mesotracker.services.store import ProgressionStore

logger = logging.getLogger(__name__)


class PromptSkipped(Exception):
    """The user dismissed a soreness prompt without answering."""


class SorenessPrompter(Protocol):
    async def ask(self, muscle_group: str) -> SorenessLevel:
        """Present one prompt and wait for the answer. May raise PromptSkipped."""
        ...


def muscle_groups_needing_soreness(template: DayTemplate, trained_before: set[str]) -> list[str]:
    """
    Today's muscle groups (template order) that were already trained on an earlier
    (week, day) of this run of the plan. In week 1 that means an earlier day of
    week 1; from week 2 on, any earlier session. Week 1 day 1 has no earlier
    sessions, so it never prompts.
    """
    return [mg for mg in template.muscle_groups() if mg in trained_before]


async def soreness_queue(
    store: ProgressionStore,
    user_id: uuid.UUID,
    plan_id: uuid.UUID,
    cycle_id: uuid.UUID,
    template: DayTemplate,
    week: int,
    day: int,
) -> list[str]:
    if week == 1 and day == 1:
        return []
    try:
        trained = await store.trained_muscle_groups(user_id, plan_id, cycle_id, week, day)
    except Exception:
        logger.exception("Could not load training history for soreness prompts (plan %s)", plan_id)
        return []
    return muscle_groups_needing_soreness(template, trained)


async def elicit_soreness(
    queue: list[str],
    prompter: SorenessPrompter,
    store: ProgressionStore,
    user_id: uuid.UUID,
    today: date,
    timeout: float,
) -> dict[str, SorenessLevel]:
    """
    Ask for each muscle group strictly one at a time. Each answer is saved right away;
    a timed-out or skipped prompt leaves that group out of the result (no adjustment)
    and moves on to the next one.
    """
    answers: dict[str, SorenessLevel] = {}
    for muscle_group in queue:
        try:
            level = await asyncio.wait_for(prompter.ask(muscle_group), timeout=timeout)
        except asyncio.TimeoutError:
            logger.info("Soreness prompt for %s timed out after %ss", muscle_group, timeout)
            continue
        except PromptSkipped:
            logger.info("Soreness prompt for %s skipped", muscle_group)
            continue

        level = SorenessLevel(level)
        answers[muscle_group] = level
        try:
            await store.add_soreness(
                SorenessRecord(
                    user_id=user_id,
                    workout_date=today,
                    muscle_group=muscle_group,
                    soreness_level=level.value,
                    healed=level == SorenessLevel.NONE,
                )
            )
        except Exception:
            logger.exception("Failed to save soreness for %s; continuing", muscle_group)
    return answers
