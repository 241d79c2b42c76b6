"""Traversal helpers for the upstream rule tree."""

import logging
from typing import List, Optional, Union

from .models import RuleNode, NodeType

logger = logging.getLogger(__name__)


class TreeTraverser:
    """Structural search over a tree of typed RuleNodes."""

    def find_leftmost_leaf(self, root: Optional[RuleNode]) -> Optional[RuleNode]:
        """Follow the first child at every level until reaching a leaf."""
        if root is None:
            logger.warning("find_leftmost_leaf called with null root")
            return None

        current = root
        while current.children:
            current = current.children[0]

        logger.debug(f"Found leftmost leaf [type={current.type}, input_length={len(current.input or '')}]")
        return current

    def find_matching_action(self, condition: Optional[RuleNode]) -> Optional[RuleNode]:
        """
        Find the action that governs a condition node.

        Walks up through the parents; at each level the parent's children are
        scanned for an Action node and the first one found is returned.

        Args:
            condition: Condition node to start from

        Returns:
            Matching Action node, or None when the root is reached first
        """
        if condition is None:
            logger.warning("find_matching_action called with null condition")
            return None

        current = condition
        while current.parent is not None:
            parent = current.parent
            action = self._find_action_in_children(parent)
            if action is not None:
                logger.debug(f"Found matching action [parent_type={parent.type}]")
                return action
            current = parent

        logger.debug(f"No matching action found [condition_type={condition.type}]")
        return None

    def _find_action_in_children(self, parent: RuleNode) -> Optional[RuleNode]:
        for child in parent.children:
            if child.is_type(NodeType.ACTION):
                return child
        return None

    def get_siblings(self, node: Optional[RuleNode]) -> List[RuleNode]:
        """All children of the node's parent, the node itself included."""
        if node is None or node.parent is None:
            return []
        return list(node.parent.children)

    def find_all(self, root: Optional[RuleNode], node_type: Union[str, NodeType]) -> List[RuleNode]:
        """Depth-first, pre-order list of nodes with the given type."""
        found = []
        if root is None:
            return found

        stack = [root]
        while stack:
            node = stack.pop()
            if node.is_type(node_type):
                found.append(node)
            stack.extend(reversed(node.children))
        return found
