"""Tests for schedule field maps and the schedule DSL."""

import pytest

from text2rule.models import ScheduleRecord
from text2rule.schedule import (
    ScheduleExtractor,
    ScheduleSerializer,
    build_monthly_date_field,
    format_time,
    normalize_boolean,
    to_dsl,
    to_map,
)


def monthly_record(**overrides):
    values = dict(
        schedule_type="Monthly",
        day="1,15",
        hours="2",
        start_time_map={"ALL": "9:00"},
        end_time_map={"ALL": "17:00"},
    )
    values.update(overrides)
    return ScheduleRecord(**values)


class TestNormalization:
    """Boolean and time normalization helpers."""

    @pytest.mark.parametrize("value,expected", [
        ("Yes", "true"), ("TRUE", "true"), ("1", "true"),
        ("no", "false"), ("False", "false"), ("0", "false"),
        (None, "true"), ("maybe", "true"), ("", "true"),
    ])
    def test_normalize_boolean(self, value, expected):
        assert normalize_boolean(value) == expected

    @pytest.mark.parametrize("value,expected", [
        ("09:00", "09:00"),
        ("9:00", "09:00"),
        ("9:05 AM", "09:05"),
        ("at 17:30", "17:30"),
        ("noon", "noon"),
    ])
    def test_format_time(self, value, expected):
        assert format_time(value) == expected


class TestToMap:
    """Ordered field map generation."""

    def test_minimal_record(self):
        field_map = to_map(ScheduleRecord(schedule_type="Daily"))

        assert field_map == {"schedule_name": "", "schedule_type": "Daily", "repeat": "true"}
        assert list(field_map) == ["schedule_name", "schedule_type", "repeat"]

    def test_full_field_order(self):
        record = monthly_record(
            start_date="2025-01-01", end_date="2025-12-31", minutes="30",
            repeat="no", select_days=[1, 15],
        )

        field_map = to_map(record)

        assert list(field_map) == [
            "schedule_name", "schedule_type", "segment_rule_start_date", "segment_rule_end_date",
            "repeat", "hours", "minutes", "day", "select_days", "start_time", "end_time", "date",
        ]
        assert field_map["repeat"] == "false"
        assert field_map["select_days"] == [1, 15]

    def test_blank_values_omitted(self):
        field_map = to_map(ScheduleRecord(schedule_type="Weekly", start_date="  ", hours="", day=None))

        assert "segment_rule_start_date" not in field_map
        assert "hours" not in field_map
        assert "day" not in field_map

    def test_data_less_record(self):
        assert to_map(ScheduleRecord(repeat="Yes")) == {}
        assert to_map(None) == {}

    def test_monthly_date_field(self):
        assert to_map(monthly_record())["date"] == "1 09:00-17:00, 15 09:00-17:00"

    def test_interval_flag_alone_triggers_date(self):
        record = monthly_record(hours=None, interval="yes")
        assert to_map(record)["date"] == "1 09:00-17:00, 15 09:00-17:00"

    def test_monthly_without_interval_has_no_date(self):
        record = monthly_record(hours=None, interval="No")
        assert "date" not in to_map(record)

    def test_non_monthly_has_no_date(self):
        assert "date" not in to_map(monthly_record(schedule_type="Weekly"))

    def test_monthly_with_interval_type(self):
        assert "date" in to_map(monthly_record(schedule_type="MonthlyWithInterval"))


class TestMonthlyDateField:
    """Compact multi-day Date reconstruction."""

    def test_per_day_times_take_precedence(self):
        record = monthly_record(
            day="1 15",
            start_time_map={"1": "8:00", "ALL": "9:00"},
            end_time_map={"15": "18:00", "ALL": "17:00"},
        )
        assert build_monthly_date_field(record) == "1 08:00-17:00, 15 09:00-18:00"

    def test_first_value_fallback(self):
        record = monthly_record(start_time_map={"MON": "7:15", "TUE": "8:00"}, end_time_map={})
        assert build_monthly_date_field(record) == "1 07:15, 15 07:15"

    def test_no_times(self):
        record = monthly_record(start_time_map={}, end_time_map={})
        assert build_monthly_date_field(record) == "1, 15"

    def test_non_numeric_tokens_dropped(self):
        record = monthly_record(day="1, last, 20")
        assert build_monthly_date_field(record) == "1 09:00-17:00, 20 09:00-17:00"

    def test_missing_day(self):
        assert build_monthly_date_field(monthly_record(day=None)) == ""


class TestToDsl:
    """Canonical schedule(...) call."""

    def test_example_output(self):
        field_map = {
            "schedule_name": "",
            "schedule_type": "Monthly",
            "segment_rule_start_date": "2025-01-01",
            "segment_rule_end_date": "2025-06-30",
            "repeat": "true",
            "hours": "2",
            "date": "1 09:00-17:00, 15 09:00-17:00",
        }

        assert to_dsl(field_map, "167") == (
            'schedule(ScheduleName="", ScheduleType="Monthly", StartDate="2025-01-01", '
            'ExpiryDate="2025-06-30", Repeat="true", Hours="2", '
            'Date="1 09:00-17:00, 15 09:00-17:00", LeadPolicyId="167")'
        )

    def test_defaults(self):
        assert to_dsl({"hours": ""}) == 'schedule(ScheduleName="", ScheduleType="Daily", Repeat="true")'

    def test_empty_map(self):
        assert to_dsl({}) == ""
        assert to_dsl(None, "167") == ""

    def test_blank_policy_id_omitted(self):
        assert "LeadPolicyId" not in to_dsl({"schedule_type": "Daily"}, "")

    def test_round_trip_preserves_normalized_values(self):
        record = monthly_record(repeat="YES", minutes="15")

        field_map = to_map(record)
        dsl = to_dsl(field_map)

        assert field_map["repeat"] == "true"
        assert 'ScheduleType="Monthly"' in dsl
        assert 'Repeat="true"' in dsl
        assert 'Hours="2"' in dsl
        assert 'Minutes="15"' in dsl
        assert 'Date="1 09:00-17:00, 15 09:00-17:00"' in dsl

    def test_free_text_to_dsl(self):
        record = ScheduleExtractor().extract_text("every 2 hours from 9:00 to 17:00, monthly on the 1st")
        dsl = to_dsl(to_map(record), "167")

        # No Day value in free text, so no Date field
        assert dsl == 'schedule(ScheduleName="", ScheduleType="Monthly", Repeat="true", Hours="2", LeadPolicyId="167")'


class TestScheduleSerializer:
    """Object wrapper with a default policy id."""

    def test_default_policy_id(self):
        serializer = ScheduleSerializer(default_policy_id="42")
        dsl = serializer.record_to_dsl(ScheduleRecord(schedule_type="Daily"))
        assert dsl.endswith('LeadPolicyId="42")')

    def test_explicit_policy_id_wins(self):
        serializer = ScheduleSerializer(default_policy_id="42")
        assert 'LeadPolicyId="7"' in serializer.to_dsl({"schedule_type": "Daily"}, "7")


class TestFailSoft:
    """Bad input degrades to an empty map or an empty DSL string."""

    @pytest.mark.parametrize("value", [{"schedule_type": "Daily"}, "Daily", 42])
    def test_to_map_rejects_non_records(self, value):
        assert to_map(value) == {}

    def test_to_map_internal_error(self):
        # Non-string day breaks Date reconstruction
        record = ScheduleRecord(schedule_type="Monthly", hours="2", day=15, start_time_map={"ALL": "9:00"})
        assert to_map(record) == {}

    @pytest.mark.parametrize("value", [["x"], "schedule_type=Daily"])
    def test_to_dsl_rejects_non_mappings(self, value):
        assert to_dsl(value) == ""
