"""Fluent builder over the tree assemblers."""

import logging
from typing import Any, Dict, List, Optional

from ..models import Cluster, RuleDocument
from .base_builder import LeafInput, normalize_records, normalize_schedule
from .group_builder import Extractor, GroupAssembler
from .tree_builder import TreeAssembler

logger = logging.getLogger(__name__)


class RuleJsonBuilder:
    """
    Accumulates conditions, actions and schedule until build().

    Not safe for concurrent use: setters and build() share the same lists.
    Use one instance per caller, or the pure assemble() functions.
    """

    def __init__(self):
        self.conditions: List[LeafInput] = []
        self.actions: List[LeafInput] = []
        self.schedule: Optional[Dict[str, Any]] = None

    def with_conditions(self, conditions: Optional[List[LeafInput]]) -> "RuleJsonBuilder":
        self.conditions = normalize_records(conditions, "conditions")
        logger.debug(f"Set conditions [count={len(self.conditions)}]")
        return self

    def with_actions(self, actions: Optional[List[LeafInput]]) -> "RuleJsonBuilder":
        self.actions = normalize_records(actions, "actions")
        logger.debug(f"Set actions [count={len(self.actions)}]")
        return self

    def with_schedule(self, schedule: Optional[Dict[str, Any]]) -> "RuleJsonBuilder":
        self.schedule = normalize_schedule(schedule)
        logger.debug(f"Set schedule [has_data={self.schedule is not None}]")
        return self

    def build(self) -> RuleDocument:
        return TreeAssembler().assemble(self.conditions, self.actions, self.schedule)

    def build_from_groups(
        self,
        clusters: Optional[List[Cluster]],
        condition_extractor: Extractor,
        action_extractor: Extractor
    ) -> RuleDocument:
        """Build from clusters, attaching the accumulated schedule."""
        return GroupAssembler().assemble(clusters, condition_extractor, action_extractor, self.schedule)

    def build_json(self, indent: Optional[int] = 2) -> str:
        return self.build().to_json(indent=indent)

    def reset(self) -> "RuleJsonBuilder":
        """Restore the empty state."""
        self.conditions = []
        self.actions = []
        self.schedule = None
        logger.debug("Builder reset to initial state")
        return self
