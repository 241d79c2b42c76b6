"""
Per-type schedule DSL generation.

Produces output like:
    schedule(ScheduleName="Daily", ScheduleType="Daily", StartTime="ALL:10:00",
             Repeat="Yes", Day="ALL", SelectDays="ALL")

The parameter set depends on the schedule type; see TYPE_PLANS.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..json_extractor import extract_json_string
from ..models import ScheduleRecord
from .serializer import to_map

logger = logging.getLogger(__name__)

ScheduleInput = Union[str, Mapping[str, Any], ScheduleRecord, None]


def format_param(key: str, value: Optional[str]) -> str:
    return f'{key}="{value if value is not None else ""}"'


def _text(schedule: Mapping[str, Any], key: str) -> Optional[str]:
    value = schedule.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value)
    if not text or text == "null":
        return None
    return text


def _time_map_value(value: Any) -> Optional[str]:
    if not isinstance(value, Mapping) or not value:
        return None
    return "|".join(f"{key}:{time}" for key, time in value.items())


def add_dates(schedule: Mapping[str, Any], params: List[str]):
    start_date = _text(schedule, "segment_rule_start_date")
    end_date = _text(schedule, "segment_rule_end_date")
    if start_date:
        params.append(format_param("StartDate", start_date))
    if end_date:
        params.append(format_param("ExpiryDate", end_date))


def add_start_time(schedule: Mapping[str, Any], params: List[str]):
    value = _time_map_value(schedule.get("start_time"))
    if value:
        params.append(format_param("StartTime", value))


def add_end_time(schedule: Mapping[str, Any], params: List[str]):
    value = _time_map_value(schedule.get("end_time"))
    if value:
        params.append(format_param("EndTime", value))


def add_hours_minutes(schedule: Mapping[str, Any], params: List[str]):
    hours = _text(schedule, "hours")
    minutes = _text(schedule, "minutes")
    if hours:
        params.append(format_param("Hours", hours))
    if minutes:
        params.append(format_param("Minutes", minutes))


def add_select_days(schedule: Mapping[str, Any], params: List[str]):
    select_days = schedule.get("select_days")
    if not isinstance(select_days, list) or not select_days:
        return
    days = [str(day) for day in select_days if isinstance(day, (str, int)) and not isinstance(day, bool)]
    params.append(format_param("SelectDays", ",".join(days)))


def add_interval_description(schedule: Mapping[str, Any], params: List[str]):
    # Only descriptive intervals; the Yes/No flag is not a description
    interval = _text(schedule, "interval")
    if interval and interval not in ("Yes", "No"):
        params.append(format_param("Interval", interval))


def _optional(param: str, key: str) -> Callable[[Mapping[str, Any], List[str]], None]:
    def add(schedule: Mapping[str, Any], params: List[str]):
        value = _text(schedule, key)
        if value:
            params.append(format_param(param, value))
    return add


def _constant(param: str, value: str) -> Callable[[Mapping[str, Any], List[str]], None]:
    def add(schedule: Mapping[str, Any], params: List[str]):
        params.append(format_param(param, value))
    return add


add_repeat = _optional("Repeat", "repeat")
add_frequency = _optional("Frequency", "frequency")
add_day = _optional("Day", "day")
add_type = _optional("Type", "type")
add_period = _optional("Period", "period")
add_week = _optional("Week", "week")
add_interval_flag = _constant("Interval", "Yes")
add_all_days = _constant("Day", "ALL")
add_all_select_days = _constant("SelectDays", "ALL")

_WITH_INTERVAL = [
    add_dates, add_interval_flag, add_frequency, add_start_time, add_end_time,
    add_repeat, add_hours_minutes,
]

# Schedule type -> parameter builders applied after ScheduleName/ScheduleType
TYPE_PLANS: Dict[str, List[Callable]] = {
    "ScheduleNow": [],
    "Daily": [add_dates, add_start_time, add_repeat, add_all_days, add_all_select_days],
    "DailyWithInterval": _WITH_INTERVAL + [add_all_days, add_all_select_days],
    "Weekly": [add_dates, add_start_time, add_repeat, add_day, add_select_days],
    "WeeklyWithInterval": _WITH_INTERVAL + [add_day, add_select_days],
    "Monthly": [add_dates, add_start_time, add_repeat, add_day, add_select_days],
    "MonthlyWithInterval": _WITH_INTERVAL + [add_day, add_select_days],
    "MonthlyWithSpecifics": [
        add_dates, add_start_time, add_repeat, add_type, add_period, add_week,
        add_day, add_select_days,
    ],
    "Interval": [
        add_dates, add_interval_description, add_start_time, add_repeat,
        add_hours_minutes, add_select_days,
    ],
}


def load_schedule(schedule: ScheduleInput) -> Optional[Mapping[str, Any]]:
    """Normalize any accepted input to a schedule field map."""
    if schedule is None:
        return None
    if isinstance(schedule, ScheduleRecord):
        return to_map(schedule)
    if isinstance(schedule, Mapping):
        return schedule

    text = str(schedule).strip()
    if not text or text == "{}":
        return None

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        json_string = extract_json_string(text)
        if json_string is None:
            logger.warning("No JSON found in schedule input")
            return None
        parsed = json.loads(json_string)

    # Array wrapper
    if isinstance(parsed, list):
        parsed = parsed[0] if parsed else None
    return parsed if isinstance(parsed, Mapping) else None


def generate_typed_dsl(schedule: ScheduleInput) -> str:
    """
    Generate the per-type DSL string.

    Args:
        schedule: Field map, JSON text (bare or fenced) or ScheduleRecord

    Returns:
        DSL string, or "" when the input is empty, invalid or has no type
    """
    try:
        field_map = load_schedule(schedule)
        if not field_map:
            logger.debug("Empty schedule, returning empty DSL")
            return ""

        schedule_type = _text(field_map, "schedule_type")
        if not schedule_type:
            logger.warning("Missing schedule_type in schedule")
            return ""

        params = [
            format_param("ScheduleName", schedule_type),
            format_param("ScheduleType", schedule_type),
        ]
        plan = TYPE_PLANS.get(schedule_type)
        if plan is None:
            logger.warning(f"Unknown schedule type: {schedule_type}")
            plan = []

        for add in plan:
            add(field_map, params)

        dsl = f"schedule({', '.join(params)})"
        logger.info(f"Generated schedule DSL: {dsl}")
        return dsl
    except Exception as e:
        logger.error(f"Failed to generate typed schedule DSL [error={e}]", exc_info=True)
        return ""
