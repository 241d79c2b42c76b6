"""Convert ScheduleRecords into rule-tree field maps and schedule DSL."""

import re
import logging
from typing import Any, Dict, List, Mapping, Optional

from ..models import ScheduleRecord, ALL_DAYS

logger = logging.getLogger(__name__)

TRUE_VALUES = {"yes", "true", "1"}
FALSE_VALUES = {"no", "false", "0"}

DAY_SPLIT_PATTERN = re.compile(r"[,\s]+")
NUMERIC_PATTERN = re.compile(r"[0-9]+")
HH_MM_PATTERN = re.compile(r"\d{2}:\d{2}")
H_MM_PATTERN = re.compile(r"\d:\d{2}")
TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})")

# DSL parameter -> (field map key, default); default None means optional
DSL_FIELDS = [
    ("ScheduleName", "schedule_name", ""),
    ("ScheduleType", "schedule_type", "Daily"),
    ("StartDate", "segment_rule_start_date", None),
    ("ExpiryDate", "segment_rule_end_date", None),
    ("Repeat", "repeat", "true"),
    ("Hours", "hours", None),
    ("Minutes", "minutes", None),
    ("Date", "date", None),
]


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def normalize_boolean(value: Optional[str]) -> str:
    """Normalize yes/no style values to "true"/"false"; defaults to "true"."""
    if value is None:
        return "true"
    lower = str(value).strip().lower()
    if lower in TRUE_VALUES:
        return "true"
    if lower in FALSE_VALUES:
        return "false"
    return "true"


def format_time(value: Optional[str]) -> Optional[str]:
    """Format a time string as HH:MM; unparseable input is returned unchanged."""
    if value is None:
        return None
    if HH_MM_PATTERN.fullmatch(value):
        return value
    if H_MM_PATTERN.fullmatch(value):
        return "0" + value

    match = TIME_PATTERN.search(value)
    if match:
        return f"{int(match.group(1)):02d}:{int(match.group(2)):02d}"
    return value


def resolve_time(time_map: Mapping[str, str], day: str) -> Optional[str]:
    """Time for a day: exact key, then the ALL sentinel, then the first entry."""
    if day in time_map:
        return time_map[day]
    if ALL_DAYS in time_map:
        return time_map[ALL_DAYS]
    for value in time_map.values():
        return value
    return None


def is_monthly_with_interval(record: ScheduleRecord) -> bool:
    if not record.schedule_type:
        return False
    if "monthly" not in record.schedule_type.lower():
        return False
    return (
        not _is_blank(record.hours)
        or not _is_blank(record.minutes)
        or (record.interval or "").lower() == "yes"
    )


def build_monthly_date_field(record: ScheduleRecord) -> str:
    """
    Build the compact multi-day Date value.

    Example: day="1,15", start ALL=9:00, end ALL=17:00
    gives "1 09:00-17:00, 15 09:00-17:00".
    """
    if _is_blank(record.day):
        return ""

    entries: List[str] = []
    for day in DAY_SPLIT_PATTERN.split(record.day.strip()):
        if not NUMERIC_PATTERN.fullmatch(day):
            continue

        entry = day
        start_time = resolve_time(record.start_time_map, day)
        end_time = resolve_time(record.end_time_map, day)
        if start_time is not None:
            entry += f" {format_time(start_time)}"
            if end_time is not None:
                entry += f"-{format_time(end_time)}"
        entries.append(entry)

    return ", ".join(entries)


def to_map(record: Optional[ScheduleRecord]) -> Dict[str, Any]:
    """
    Build the ordered schedule field map embedded under rules.schedule.

    Returns:
        Field map, or {} for a missing or data-less record
    """
    if record is None:
        return {}
    if not isinstance(record, ScheduleRecord):
        logger.warning(f"Cannot build schedule map from {type(record).__name__}")
        return {}

    try:
        if not record.has_data():
            return {}

        field_map: Dict[str, Any] = {
            "schedule_name": "",
            "schedule_type": record.schedule_type or "Daily",
        }

        if not _is_blank(record.start_date):
            field_map["segment_rule_start_date"] = record.start_date
        if not _is_blank(record.end_date):
            field_map["segment_rule_end_date"] = record.end_date

        field_map["repeat"] = normalize_boolean(record.repeat)

        if not _is_blank(record.hours):
            field_map["hours"] = record.hours
        if not _is_blank(record.minutes):
            field_map["minutes"] = record.minutes
        if not _is_blank(record.day):
            field_map["day"] = record.day

        if record.select_days:
            field_map["select_days"] = list(record.select_days)
        if record.start_time_map:
            field_map["start_time"] = dict(record.start_time_map)
        if record.end_time_map:
            field_map["end_time"] = dict(record.end_time_map)

        if is_monthly_with_interval(record):
            date_field = build_monthly_date_field(record)
            if date_field:
                field_map["date"] = date_field

        return field_map
    except Exception as e:
        logger.error(f"Failed to build schedule map [error={e}]", exc_info=True)
        return {}


def to_dsl(field_map: Optional[Mapping[str, Any]], policy_id: Optional[str] = None) -> str:
    """
    Generate the schedule DSL call from a field map.

    Format:
        schedule(ScheduleName="", ScheduleType="Monthly", Repeat="true",
                 Hours="2", Date="1 09:00-17:00", LeadPolicyId="167")
    """
    if not field_map:
        return ""

    try:
        params = []
        for param, key, default in DSL_FIELDS:
            value = field_map.get(key)
            if default is None:
                if _is_blank(value):
                    continue
            elif value is None:
                value = default
            params.append(f'{param}="{value}"')

        if not _is_blank(policy_id):
            params.append(f'LeadPolicyId="{policy_id}"')

        return f"schedule({', '.join(params)})"
    except Exception as e:
        logger.error(f"Failed to generate schedule DSL [error={e}]", exc_info=True)
        return ""


class ScheduleSerializer:
    """Object wrapper over to_map/to_dsl, with an optional default policy id."""

    def __init__(self, default_policy_id: Optional[str] = None):
        self.default_policy_id = default_policy_id

    def to_map(self, record: Optional[ScheduleRecord]) -> Dict[str, Any]:
        return to_map(record)

    def to_dsl(self, field_map: Optional[Mapping[str, Any]], policy_id: Optional[str] = None) -> str:
        return to_dsl(field_map, policy_id if policy_id is not None else self.default_policy_id)

    def record_to_dsl(self, record: Optional[ScheduleRecord], policy_id: Optional[str] = None) -> str:
        return self.to_dsl(self.to_map(record), policy_id)
