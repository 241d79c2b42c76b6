"""
Condition/action grouping.

Turns an upstream rule tree into the clusters consumed by the group
assembler:
1. Every IF_Condition node is located
2. Each condition is paired with the Action found by walking up its parents
3. Conditions without an action form a leading cluster
"""

import logging
from typing import Dict, List, Optional

from .models import Cluster, RuleNode, NodeType
from .tree_traverser import TreeTraverser

logger = logging.getLogger(__name__)


class ConditionActionGrouper:
    """Groups condition nodes by the action that governs them."""

    def __init__(self, traverser: TreeTraverser = None):
        self.traverser = traverser or TreeTraverser()

    def group_conditions_by_action(self, root: Optional[RuleNode]) -> List[Cluster]:
        """
        Group conditions by their matching actions.

        Clusters with an action keep the order in which each action was first
        reached from a condition.
        """
        conditions = self.traverser.find_all(root, NodeType.IF_CONDITION)
        logger.info(f"Found {len(conditions)} total IF_Condition nodes")

        # Keyed by node identity, RuleNode is not hashable by value
        by_action: Dict[int, Cluster] = {}
        orphans: List[RuleNode] = []

        for condition in conditions:
            action = self.traverser.find_matching_action(condition)
            if action is None:
                orphans.append(condition)
                continue

            cluster = by_action.get(id(action))
            if cluster is None:
                cluster = Cluster(action_source=action)
                by_action[id(action)] = cluster
            cluster.condition_sources.append(condition)

        clusters = []
        if orphans:
            clusters.append(Cluster(condition_sources=orphans))
            logger.info(f"Created group without action [conditions={len(orphans)}]")

        for cluster in by_action.values():
            clusters.append(cluster)
            logger.info(
                f"Created group with action [conditions={len(cluster.condition_sources)}, "
                f"action_type={cluster.action_source.type}]"
            )

        return clusters
