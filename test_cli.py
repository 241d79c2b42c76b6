"""Tests for the command-line entry point and settings."""

import json
import os

import pytest

from text2rule.config import Settings
from text2rule.main import main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # load_dotenv writes into os.environ; give each test its own copy
    monkeypatch.setattr(os, "environ", os.environ.copy())
    for name in ("TEXT2RULE_LOG_LEVEL", "TEXT2RULE_LEAD_POLICY_ID", "TEXT2RULE_JSON_INDENT"):
        os.environ.pop(name, None)


class TestSettings:
    """Environment-driven configuration."""

    def test_defaults(self, tmp_path):
        settings = Settings.from_env(str(tmp_path / "missing.env"))

        assert settings.log_level == "INFO"
        assert settings.lead_policy_id is None
        assert settings.json_indent == 2

    def test_dotenv_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("TEXT2RULE_LEAD_POLICY_ID=167\nTEXT2RULE_LOG_LEVEL=debug\nTEXT2RULE_JSON_INDENT=4\n")

        settings = Settings.from_env(str(env_file))

        assert settings.lead_policy_id == "167"
        assert settings.log_level == "DEBUG"
        assert settings.json_indent == 4

    def test_invalid_indent(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TEXT2RULE_JSON_INDENT", "wide")
        assert Settings.from_env(str(tmp_path / "missing.env")).json_indent == 2


class TestTreeCommand:
    """text2rule tree"""

    def test_conditions_and_actions(self, tmp_path, capsys):
        conditions = tmp_path / "conditions.json"
        actions = tmp_path / "actions.json"
        output = tmp_path / "rule.json"
        conditions.write_text(json.dumps([{"field": "c0"}, {"field": "c1"}]))
        actions.write_text(json.dumps([{"action": "a0"}]))

        code = main([
            "tree", "--conditions", str(conditions), "--actions", str(actions),
            "--schedule-text", "Schedule Type: Daily, Repeat: No", "--output", str(output),
        ])

        assert code == 0
        rules = json.loads(output.read_text())[0]["detail"]["rules"]
        groups = rules["childrens"][0]["childrens"]
        assert [g["id"] for g in groups] == ["0_0_0", "0_0_1"]
        assert rules["schedule"]["repeat"] == "false"

    def test_rule_tree(self, tmp_path, capsys):
        tree = tmp_path / "tree.json"
        tree.write_text(json.dumps({
            "type": "Root",
            "children": [
                {"type": "IF_Condition", "input": "balance > 10"},
                {"type": "Action", "input": "send sms"},
                {"type": "Schedule", "input": "weekly on monday"},
            ],
        }))

        assert main(["tree", "--rule-tree", str(tree)]) == 0

        rules = json.loads(capsys.readouterr().out)[0]["detail"]["rules"]
        leaves = rules["childrens"][0]["childrens"][0]["childrens"]
        assert [leaf["input"] for leaf in leaves] == ["balance > 10", "send sms"]
        assert rules["schedule"]["schedule_type"] == "Weekly"

    def test_missing_file(self, tmp_path, capsys):
        assert main(["tree", "--conditions", str(tmp_path / "nope.json")]) == 2


class TestScheduleCommand:
    """text2rule schedule"""

    def test_text_to_dsl(self, capsys):
        code = main(["schedule", "--text", "Schedule Type: Monthly, Hours: 2, Day: 1 15, Start Time: {ALL=9:00}",
                     "--policy-id", "167"])

        assert code == 0
        assert capsys.readouterr().out.strip() == (
            'schedule(ScheduleName="", ScheduleType="Monthly", Repeat="true", Hours="2", '
            'Date="1 09:00, 15 09:00", LeadPolicyId="167")'
        )

    def test_typed(self, capsys):
        assert main(["schedule", "--text", "every day from 10:00 to 11:00", "--typed"]) == 0
        assert capsys.readouterr().out.startswith('schedule(ScheduleName="Weekly", ScheduleType="Weekly"')

    def test_policy_id_from_env(self, monkeypatch, capsys):
        monkeypatch.setenv("TEXT2RULE_LEAD_POLICY_ID", "99")
        assert main(["schedule", "--text", "at 10:00"]) == 0
        assert capsys.readouterr().out.strip().endswith('LeadPolicyId="99")')

    def test_no_schedule(self, capsys):
        assert main(["schedule", "--text", ""]) == 1
