"""Data models for rule tree assembly and schedule parsing."""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any, Union, Mapping
from enum import Enum
import json


ROOT_ID = "0"
ROOT_PID = "#"
OUTER_GROUP_ID = "0_0"
GROUP_TYPE = "conditions"

# Reserved positional keys injected into every leaf
RESERVED_KEYS = ("id", "pid")

# Sentinel time-map key meaning "every day"
ALL_DAYS = "ALL"


class GroupOption(str, Enum):
    """Combination semantics of a condition group."""
    ANY = "Any"
    ALL = "All"


class NodeType(str, Enum):
    """Node types of the upstream rule tree."""
    SCHEDULE = "Schedule"
    SCHEDULE_DETAILS = "ScheduleDetails"
    IF_CONDITION = "IF_Condition"
    ACTION = "Action"


@dataclass
class LeafRecord:
    """A condition or action entry attached to an inner group.

    The payload fields are opaque to the assembler; only ``id`` and ``pid``
    are positional and get rewritten when the leaf is placed in the tree.
    When the source mapping already carried them, they keep their original
    key positions on output; otherwise they follow the payload fields.
    """
    id: str = ""
    pid: str = ""
    fields: Dict[str, Any] = field(default_factory=dict)
    key_order: List[str] = field(default_factory=list, repr=False, compare=False)

    @classmethod
    def from_mapping(cls, mapping: Union["LeafRecord", Mapping[str, Any]]) -> "LeafRecord":
        """Shallow-copy a mapping (or another leaf) into a new LeafRecord."""
        if isinstance(mapping, LeafRecord):
            return cls(id=mapping.id, pid=mapping.pid, fields=dict(mapping.fields),
                       key_order=list(mapping.key_order))
        if not isinstance(mapping, Mapping):
            raise TypeError(f"Leaf record must be a mapping, got {type(mapping).__name__}")

        extras = {k: v for k, v in mapping.items() if k not in RESERVED_KEYS}
        has_reserved = any(key in mapping for key in RESERVED_KEYS)
        return cls(
            id=str(mapping.get("id", "") or ""),
            pid=str(mapping.get("pid", "") or ""),
            fields=extras,
            key_order=list(mapping.keys()) if has_reserved else [],
        )

    def placed(self, leaf_id: str, parent_id: str) -> "LeafRecord":
        """Return a copy positioned at ``leaf_id`` under ``parent_id``."""
        return LeafRecord(id=leaf_id, pid=parent_id, fields=dict(self.fields), key_order=list(self.key_order))

    def to_dict(self) -> Dict[str, Any]:
        positional = {"id": self.id, "pid": self.pid}
        result: Dict[str, Any] = {}
        for key in self.key_order:
            if key in positional:
                result[key] = positional[key]
            elif key in self.fields:
                result[key] = self.fields[key]
        for key, value in self.fields.items():
            result.setdefault(key, value)
        for key, value in positional.items():
            result.setdefault(key, value)
        return result


@dataclass
class TreeNode:
    """A condition group node (outer "Any" or inner "All")."""
    id: str
    pid: str
    option: Optional[str] = None
    type: str = GROUP_TYPE
    children: List[Union["TreeNode", LeafRecord]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "id": self.id,
            "pid": self.pid,
            "type": self.type,
        }
        if self.option is not None:
            result["option"] = self.option
        result["childrens"] = [child.to_dict() for child in self.children]
        return result


@dataclass
class RuleDocument:
    """The assembled rule tree plus an optional schedule field map."""
    childrens: List[TreeNode] = field(default_factory=list)
    schedule: Optional[Dict[str, Any]] = None

    @property
    def outer_group(self) -> Optional[TreeNode]:
        return self.childrens[0] if self.childrens else None

    @property
    def inner_groups(self) -> List[TreeNode]:
        outer = self.outer_group
        if outer is None:
            return []
        return [child for child in outer.children if isinstance(child, TreeNode)]

    def to_list(self) -> List[Dict[str, Any]]:
        """Convert to the rule JSON envelope."""
        rules = {
            "id": ROOT_ID,
            "pid": ROOT_PID,
            "childrens": [node.to_dict() for node in self.childrens],
        }
        if self.schedule:
            rules["schedule"] = self.schedule
        return [{"detail": {"rules": rules}}]

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_list(), indent=indent)


@dataclass
class ScheduleRecord:
    """Normalized schedule data extracted from descriptor text."""
    schedule_type: Optional[str] = None
    repeat: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    interval: Optional[str] = None
    frequency: Optional[str] = None
    hours: Optional[str] = None
    minutes: Optional[str] = None
    day: Optional[str] = None
    start_time_map: Dict[str, str] = field(default_factory=dict)
    end_time_map: Dict[str, str] = field(default_factory=dict)
    select_days: List[Union[int, str]] = field(default_factory=list)

    def has_data(self) -> bool:
        return bool(self.schedule_type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schedule_type": self.schedule_type,
            "repeat": self.repeat,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "interval": self.interval,
            "frequency": self.frequency,
            "hours": self.hours,
            "minutes": self.minutes,
            "day": self.day,
            "start_time": dict(self.start_time_map),
            "end_time": dict(self.end_time_map),
            "select_days": list(self.select_days),
        }


@dataclass
class Cluster:
    """Pre-formed group: nested condition sources plus an optional action source."""
    condition_sources: List[Any] = field(default_factory=list)
    action_source: Optional[Any] = None

    def has_action(self) -> bool:
        return self.action_source is not None


class RuleNode:
    """A node of the upstream rule tree (typed node with free-text input)."""

    def __init__(self, type: str, input: str = "", children: List["RuleNode"] = None):
        self.type = type
        self.input = input
        self.children: List["RuleNode"] = []
        self.parent: Optional["RuleNode"] = None
        for child in children or []:
            self.add_child(child)

    def add_child(self, child: "RuleNode") -> "RuleNode":
        child.parent = self
        self.children.append(child)
        return child

    def is_type(self, node_type: Union[str, NodeType]) -> bool:
        expected = node_type.value if isinstance(node_type, NodeType) else node_type
        return (self.type or "").lower() == expected.lower()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RuleNode":
        """Build a tree from ``{"type", "input", "children"}`` JSON."""
        node = cls(type=data.get("type", ""), input=data.get("input") or "")
        for child in data.get("children") or []:
            node.add_child(cls.from_dict(child))
        return node

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "input": self.input,
            "children": [child.to_dict() for child in self.children],
        }

    def __repr__(self) -> str:
        return f"RuleNode(type={self.type!r}, children={len(self.children)})"
