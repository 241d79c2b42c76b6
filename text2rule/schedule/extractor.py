"""Parse schedule descriptor text into a normalized ScheduleRecord."""

import re
import logging
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Union, Dict

from ..models import ScheduleRecord, RuleNode, NodeType, ALL_DAYS

logger = logging.getLogger(__name__)


class ExtractionMode(str, Enum):
    """How a descriptor is read."""
    STRUCTURED = "structured"
    FALLBACK = "fallback"


def _field_pattern(field_name: str) -> "re.Pattern":
    # "Field Name: value" or "Field Name = value"; value ends at , } or newline
    name = r"\s+".join(re.escape(word) for word in field_name.split())
    return re.compile(rf"(?<!\w){name}\s*[:=]\s*([^,}}\n]+)", re.IGNORECASE)


def _time_map_pattern(field_name: str) -> "re.Pattern":
    name = r"\s+".join(re.escape(word) for word in field_name.split())
    return re.compile(rf"(?<!\w){name}\s*[:=]\s*\{{([^}}]+)\}}", re.IGNORECASE)


def _setter(attr: str) -> Callable[[ScheduleRecord, str], None]:
    def set_value(record: ScheduleRecord, value: str):
        setattr(record, attr, value)
    return set_value


# Field name -> compiled pattern -> setter
FIELD_EXTRACTORS = [
    ("Schedule Type", _field_pattern("Schedule Type"), _setter("schedule_type")),
    ("Repeat", _field_pattern("Repeat"), _setter("repeat")),
    ("Start Date", _field_pattern("Start Date"), _setter("start_date")),
    ("End Date", _field_pattern("End Date"), _setter("end_date")),
    ("Interval", _field_pattern("Interval"), _setter("interval")),
    ("Frequency", _field_pattern("Frequency"), _setter("frequency")),
    ("Hours", _field_pattern("Hours"), _setter("hours")),
    ("Minutes", _field_pattern("Minutes"), _setter("minutes")),
    ("Day", _field_pattern("Day"), _setter("day")),
]

START_TIME_PATTERN = _time_map_pattern("Start Time")
END_TIME_PATTERN = _time_map_pattern("End Time")
TIME_PAIR_PATTERN = re.compile(r"(\w+)\s*=\s*([\d:]+)")
SELECT_DAYS_PATTERN = re.compile(r"select_days\s*[:=]\s*\[([^\]]+)\]", re.IGNORECASE)
QUOTES_PATTERN = re.compile(r"^[\"']|[\"']$")
NUMERIC_PATTERN = re.compile(r"[0-9]+")

# A descriptor carrying this token is read in structured mode
STRUCTURED_MARKER = FIELD_EXTRACTORS[0][1]

# Free-text keywords, checked in priority order
SCHEDULE_NOW_KEYWORDS = ["now", "immediate"]
MONTHLY_KEYWORDS = ["monthly"]
WEEKLY_KEYWORDS = [
    "weekly", "every day",
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
]
ORDINAL_DAY_PATTERN = re.compile(r"\d+(?:st|nd|rd|th)")
INTERVAL_PATTERN = re.compile(r"every\s+(\d+)\s*(hour|minute)s?", re.IGNORECASE)
TIME_RANGE_PATTERN = re.compile(
    r"from\s+(\d{1,2}:\d{2})\s*(?:to|until|-)?\s*(\d{1,2}:\d{2})", re.IGNORECASE
)
DATE_PATTERN = re.compile(r"(\d{4}-\d{2}-\d{2}|\d{2}/\d{2}/\d{4})")


class ScheduleExtractor:
    """Locate and parse schedule descriptors."""

    def extract(self, root: Union[RuleNode, Mapping[str, Any], None]) -> Optional[ScheduleRecord]:
        """
        Extract a schedule from a rule tree.

        The first Schedule node (depth-first) is used. If it has a
        ScheduleDetails child the details are parsed in structured mode,
        otherwise the Schedule node's own text is parsed in fallback mode.

        Args:
            root: Rule tree root (RuleNode or its dict form)

        Returns:
            ScheduleRecord with data, or None
        """
        if root is None:
            logger.warning("Cannot extract schedule: root is null")
            return None

        try:
            if isinstance(root, Mapping):
                root = RuleNode.from_dict(root)
            record = self._find_schedule(root)
        except Exception as e:
            logger.error(f"Failed to extract schedule [error={e}]", exc_info=True)
            return None

        if record is None or not record.has_data():
            logger.info("Extracted schedule [has_data=false]")
            return None

        logger.info(f"Extracted schedule [has_data=true, type={record.schedule_type}]")
        return record

    def extract_text(self, text: Optional[str]) -> Optional[ScheduleRecord]:
        """Parse descriptor text, picking the mode from its content."""
        try:
            record = self.parse(text, self.detect_mode(text))
        except Exception as e:
            logger.error(f"Failed to parse schedule text [error={e}]", exc_info=True)
            return None
        return record if record is not None and record.has_data() else None

    def detect_mode(self, text: Optional[str]) -> ExtractionMode:
        if text and STRUCTURED_MARKER.search(text):
            return ExtractionMode.STRUCTURED
        return ExtractionMode.FALLBACK

    def parse(self, text: Optional[str], mode: ExtractionMode) -> Optional[ScheduleRecord]:
        if mode is ExtractionMode.STRUCTURED:
            return self.parse_structured(text)
        return self.parse_free_text(text)

    def _find_schedule(self, node: RuleNode) -> Optional[ScheduleRecord]:
        if node.is_type(NodeType.SCHEDULE):
            for child in node.children:
                if child.is_type(NodeType.SCHEDULE_DETAILS):
                    logger.debug(f"Found ScheduleDetails: {child.input}")
                    return self.parse(child.input, ExtractionMode.STRUCTURED)
            return self.parse(node.input, ExtractionMode.FALLBACK)

        for child in node.children:
            record = self._find_schedule(child)
            if record is not None and record.has_data():
                return record
        return None

    def parse_structured(self, details: Optional[str]) -> Optional[ScheduleRecord]:
        """Parse ``Key: value`` / ``Key=value`` schedule details."""
        if not details:
            return None

        record = ScheduleRecord()
        for field_name, pattern, setter in FIELD_EXTRACTORS:
            value = extract_field(details, pattern)
            if value is not None:
                setter(record, value)

        record.start_time_map = extract_time_map(details, START_TIME_PATTERN)
        record.end_time_map = extract_time_map(details, END_TIME_PATTERN)
        record.select_days = extract_select_days(details)
        return record

    def parse_free_text(self, text: Optional[str]) -> Optional[ScheduleRecord]:
        """Parse a free-form schedule sentence."""
        if not text:
            return None

        record = ScheduleRecord()
        record.schedule_type = classify_schedule_type(text)

        interval_match = INTERVAL_PATTERN.search(text)
        if interval_match:
            value = interval_match.group(1)
            if interval_match.group(2).lower() == "hour":
                record.hours = value
            else:
                record.minutes = value
            record.interval = "Yes"

        range_match = TIME_RANGE_PATTERN.search(text)
        if range_match:
            record.start_time_map[ALL_DAYS] = range_match.group(1)
            record.end_time_map[ALL_DAYS] = range_match.group(2)

        dates = DATE_PATTERN.findall(text)
        if len(dates) >= 1:
            record.start_date = dates[0]
        if len(dates) >= 2:
            record.end_date = dates[1]

        record.repeat = "Yes"
        return record


def extract_field(details: str, pattern: "re.Pattern") -> Optional[str]:
    """Single field value, or None when absent, blank or "null"."""
    match = pattern.search(details)
    if not match:
        return None
    value = QUOTES_PATTERN.sub("", match.group(1).strip())
    if not value or value == "null":
        return None
    return value


def extract_time_map(details: str, pattern: "re.Pattern") -> Dict[str, str]:
    """Time map from ``{1=09:00, 15=09:00}`` or ``{ALL=06:15}``."""
    time_map: Dict[str, str] = {}
    match = pattern.search(details)
    if match:
        for key, value in TIME_PAIR_PATTERN.findall(match.group(1)):
            time_map[key] = value
    return time_map


def extract_select_days(details: str) -> List[Union[int, str]]:
    """Days from ``select_days: [1, 15]`` or ``select_days: ["MON", "TUE"]``."""
    select_days: List[Union[int, str]] = []
    match = SELECT_DAYS_PATTERN.search(details)
    if not match:
        return select_days

    for item in match.group(1).split(","):
        item = QUOTES_PATTERN.sub("", item.strip())
        if not item:
            continue
        select_days.append(int(item) if NUMERIC_PATTERN.fullmatch(item) else item)
    return select_days


def classify_schedule_type(text: str) -> str:
    text_lower = text.lower()

    if any(kw in text_lower for kw in SCHEDULE_NOW_KEYWORDS):
        return "ScheduleNow"
    if any(kw in text_lower for kw in MONTHLY_KEYWORDS) or ORDINAL_DAY_PATTERN.search(text_lower):
        return "Monthly"
    if any(kw in text_lower for kw in WEEKLY_KEYWORDS):
        return "Weekly"
    return "Daily"
