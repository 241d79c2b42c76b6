"""Tree assembler for flat condition/action lists."""

import logging
from typing import Any, Dict, List, Optional

from ..models import RuleDocument, TreeNode
from .base_builder import BaseTreeBuilder, LeafInput, normalize_records

logger = logging.getLogger(__name__)


class TreeAssembler(BaseTreeBuilder):
    """
    Pairs ordered conditions with ordered actions.

    Structure: outer "Any" group -> inner "All" groups -> conditions and
    action as siblings.
    """

    def assemble(
        self,
        conditions: Optional[List[LeafInput]],
        actions: Optional[List[LeafInput]] = None,
        schedule_fields: Optional[Dict[str, Any]] = None
    ) -> RuleDocument:
        """
        Build a rule document from conditions, actions and schedule fields.

        Pairing: when there are more conditions than actions, the surplus
        leading conditions share group 0 without an action; each action then
        gets its own group with the next unconsumed condition. An action
        with no condition left to pair is dropped.

        Args:
            conditions: Ordered condition records
            actions: Ordered action records
            schedule_fields: Field map attached under rules.schedule

        Returns:
            RuleDocument; never raises
        """
        conditions = normalize_records(conditions, "conditions")
        actions = normalize_records(actions, "actions")

        try:
            outer_group = self.create_outer_group()
            outer_group.children.extend(self._build_inner_groups(conditions, actions))
        except Exception as e:
            logger.error(f"Failed to build conditions with actions [error={e}]", exc_info=True)
            return self.empty_document(schedule_fields)

        logger.info(
            f"Built rule tree [outer_groups=1, inner_groups={len(outer_group.children)}, "
            f"conditions={len(conditions)}, actions={len(actions)}]"
        )
        return self.create_document(outer_group, schedule_fields)

    def _build_inner_groups(self, conditions: List[LeafInput], actions: List[LeafInput]) -> List[TreeNode]:
        groups: List[TreeNode] = []

        if not conditions:
            logger.debug("No conditions to build")
            return groups

        if not actions:
            group = self.create_inner_group(0)
            self.append_leaves(group, conditions)
            groups.append(group)
            return groups

        leading = max(0, len(conditions) - len(actions))
        if leading > 0:
            group = self.create_inner_group(len(groups))
            self.append_leaves(group, conditions[:leading])
            groups.append(group)

        for i, action in enumerate(actions):
            condition_index = leading + i
            if condition_index >= len(conditions):
                logger.debug(f"Dropping action without a condition to pair [action_index={i}]")
                continue
            group = self.create_inner_group(len(groups))
            self.append_leaves(group, [conditions[condition_index], action])
            groups.append(group)

        return groups


def assemble(
    conditions: Optional[List[LeafInput]],
    actions: Optional[List[LeafInput]] = None,
    schedule_fields: Optional[Dict[str, Any]] = None
) -> RuleDocument:
    """Module-level shortcut for TreeAssembler().assemble()."""
    return TreeAssembler().assemble(conditions, actions, schedule_fields)
