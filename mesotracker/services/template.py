"""Load-time parsing of a plan's structure JSON into typed day templates.

Plans authored through the API are validated strictly. Older or hand-edited
rows can still hold odd shapes, so the engine parses leniently: bad entries are
logged and skipped, bad counts fall back to template defaults and set counts are capped.
"""

from __future__ import annotations

import logging
from typing import Any

from mesotracker.core.constants import (
    DEFAULT_TEMPLATE_REPS,
    DEFAULT_TEMPLATE_SETS,
    MAX_SETS_PER_EXERCISE_PER_SESSION,
)
from mesotracker.schemas.plan import DayTemplate, ExerciseTemplate, parse_day_key

logger = logging.getLogger(__name__)


def _positive_int(value: Any, fallback: int) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return fallback
    return n if n >= 1 else fallback


def parse_structure(raw: Any) -> dict[int, DayTemplate]:
    """Parse {"day1": [{"muscleGroup": ..., "exercises": [...]}]} into {1: DayTemplate}."""
    days: dict[int, DayTemplate] = {}
    if not isinstance(raw, dict):
        logger.warning("Plan structure is not a mapping (%s); no days loaded", type(raw).__name__)
        return days

    for key, blocks in raw.items():
        day = parse_day_key(key)
        if day is None:
            logger.warning("Skipping plan day with invalid key %r", key)
            continue
        if not isinstance(blocks, list):
            logger.warning("Skipping day %s: expected a list of muscle groups", key)
            continue

        exercises: list[ExerciseTemplate] = []
        for block in blocks:
            if not isinstance(block, dict):
                logger.warning("Skipping malformed muscle-group block on %s", key)
                continue
            muscle_group = str(block.get("muscleGroup") or block.get("muscle_group") or "").strip()
            if not muscle_group:
                logger.warning("Skipping block without muscle group on %s", key)
                continue
            for ex in block.get("exercises") or []:
                name = str(ex.get("name") or "").strip() if isinstance(ex, dict) else ""
                if not name:
                    logger.warning("Skipping exercise without a name (%s, %s)", key, muscle_group)
                    continue
                exercises.append(
                    ExerciseTemplate(
                        exercise_name=name,
                        muscle_group=muscle_group,
                        default_sets=min(
                            _positive_int(ex.get("sets"), DEFAULT_TEMPLATE_SETS),
                            MAX_SETS_PER_EXERCISE_PER_SESSION,
                        ),
                        default_reps=_positive_int(ex.get("reps"), DEFAULT_TEMPLATE_REPS),
                    )
                )
        days[day] = DayTemplate(day=day, exercises=tuple(exercises))
    return days


def day_template(raw: Any, day: int) -> DayTemplate:
    """Template for one day index; an empty day when the plan has none."""
    return parse_structure(raw).get(day) or DayTemplate(day=day)
