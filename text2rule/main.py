"""Command-line entry point for rule tree assembly and schedule DSL generation."""

import json
import logging
import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import Settings, setup_logging
from .grouper import ConditionActionGrouper
from .models import RuleNode
from .rule_builders import assemble, assemble_groups
from .schedule import ScheduleExtractor, to_map, to_dsl, generate_typed_dsl

logger = logging.getLogger(__name__)


def load_json(path: str) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def node_to_records(node: RuleNode) -> List[Dict[str, Any]]:
    """Default extractor for rule-tree input: one leaf per node."""
    return [{"type": node.type, "input": node.input}]


def read_schedule_fields(extractor: ScheduleExtractor, args: argparse.Namespace) -> Optional[Dict[str, Any]]:
    text = None
    if args.schedule:
        text = Path(args.schedule).read_text(encoding='utf-8')
    elif args.schedule_text:
        text = args.schedule_text
    if text is None:
        return None
    return to_map(extractor.extract_text(text)) or None


def run_tree(args: argparse.Namespace, settings: Settings) -> int:
    extractor = ScheduleExtractor()
    schedule_fields = read_schedule_fields(extractor, args)

    if args.rule_tree:
        root = RuleNode.from_dict(load_json(args.rule_tree))
        clusters = ConditionActionGrouper().group_conditions_by_action(root)
        if schedule_fields is None:
            schedule_fields = to_map(extractor.extract(root)) or None
        document = assemble_groups(clusters, node_to_records, node_to_records, schedule_fields)
    else:
        conditions = load_json(args.conditions)
        actions = load_json(args.actions) if args.actions else []
        document = assemble(conditions, actions, schedule_fields)

    output = document.to_json(indent=settings.json_indent)
    if args.output:
        Path(args.output).write_text(output, encoding='utf-8')
        print(f"Saved rule tree to {args.output}")
    else:
        print(output)

    print(f"Inner groups: {len(document.inner_groups)}", file=sys.stderr)
    return 0


def run_schedule(args: argparse.Namespace, settings: Settings) -> int:
    extractor = ScheduleExtractor()
    if args.tree:
        record = extractor.extract(load_json(args.tree))
    else:
        record = extractor.extract_text(args.text)

    if record is None:
        print("No schedule found", file=sys.stderr)
        return 1

    field_map = to_map(record)
    if args.typed:
        print(generate_typed_dsl(field_map))
    else:
        print(to_dsl(field_map, args.policy_id or settings.lead_policy_id))

    if args.show_map:
        print(json.dumps(field_map, indent=settings.json_indent))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="text2rule - Assemble rule trees and schedule DSL from extracted records"
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    tree = subparsers.add_parser('tree', help='Assemble a rule tree JSON')
    source = tree.add_mutually_exclusive_group(required=True)
    source.add_argument(
        '--conditions',
        help='Path to JSON list of condition records'
    )
    source.add_argument(
        '--rule-tree',
        help='Path to rule tree JSON ({"type", "input", "children"})'
    )
    tree.add_argument(
        '--actions',
        help='Path to JSON list of action records'
    )
    tree.add_argument(
        '--schedule',
        help='Path to schedule descriptor text'
    )
    tree.add_argument(
        '--schedule-text',
        help='Schedule descriptor text'
    )
    tree.add_argument(
        '--output',
        help='Output path for the rule tree JSON'
    )

    schedule = subparsers.add_parser('schedule', help='Generate schedule DSL')
    schedule_source = schedule.add_mutually_exclusive_group(required=True)
    schedule_source.add_argument(
        '--text',
        help='Schedule descriptor text'
    )
    schedule_source.add_argument(
        '--tree',
        help='Path to rule tree JSON containing a Schedule node'
    )
    schedule.add_argument(
        '--policy-id',
        help='LeadPolicyId to append (default: TEXT2RULE_LEAD_POLICY_ID)'
    )
    schedule.add_argument(
        '--typed',
        action='store_true',
        help='Emit the per-schedule-type DSL instead'
    )
    schedule.add_argument(
        '--show-map',
        action='store_true',
        help='Also print the schedule field map'
    )
    return parser


def main(argv: List[str] = None) -> int:
    settings = Settings.from_env()
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        if args.command == 'tree':
            return run_tree(args, settings)
        return run_schedule(args, settings)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
