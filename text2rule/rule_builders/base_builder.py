"""Base tree builder with common functionality."""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..models import (
    GroupOption,
    LeafRecord,
    RuleDocument,
    TreeNode,
    ROOT_ID,
    OUTER_GROUP_ID,
)

logger = logging.getLogger(__name__)

LeafInput = Union[LeafRecord, Mapping[str, Any]]


def normalize_records(records: Any, role: str = "records") -> List[LeafInput]:
    """
    Normalize an input collection to a list.

    None and anything that is not an ordered collection of records (a bare
    mapping, a string) are treated as empty.
    """
    if records is None:
        return []
    if isinstance(records, (str, bytes, Mapping)):
        logger.warning(f"Ignoring malformed {role} collection [type={type(records).__name__}]")
        return []
    try:
        return list(records)
    except TypeError:
        logger.warning(f"Ignoring malformed {role} collection [type={type(records).__name__}]")
        return []


def normalize_schedule(schedule_fields: Any) -> Optional[Dict[str, Any]]:
    """Copy a non-empty schedule field map; anything else means no schedule."""
    if schedule_fields is None:
        return None
    if not isinstance(schedule_fields, Mapping):
        logger.warning(f"Ignoring malformed schedule fields [type={type(schedule_fields).__name__}]")
        return None
    return dict(schedule_fields) or None


class BaseTreeBuilder:
    """Base class for rule tree builders."""

    def create_outer_group(self) -> TreeNode:
        """Create the outer "Any" group (id="0_0", pid="0")."""
        return TreeNode(id=OUTER_GROUP_ID, pid=ROOT_ID, option=GroupOption.ANY.value)

    def create_inner_group(self, group_index: int) -> TreeNode:
        """Create an inner "All" group addressed by its index."""
        return TreeNode(
            id=f"{OUTER_GROUP_ID}_{group_index}",
            pid=OUTER_GROUP_ID,
            option=GroupOption.ALL.value,
        )

    def append_leaves(self, group: TreeNode, records: Iterable[LeafInput]) -> int:
        """
        Append shallow copies of records to a group, assigning sequential ids.

        Numbering continues after the group's existing children.

        Returns:
            Number of leaves appended
        """
        count = 0
        for record in records:
            leaf = LeafRecord.from_mapping(record)
            position = len(group.children)
            group.children.append(leaf.placed(f"{group.id}_{position}", group.id))
            count += 1
        return count

    def create_document(
        self,
        outer_group: TreeNode,
        schedule_fields: Optional[Dict[str, Any]] = None
    ) -> RuleDocument:
        """Wrap the outer group (and schedule, when present) in the rule envelope."""
        return RuleDocument(
            childrens=[outer_group],
            schedule=normalize_schedule(schedule_fields),
        )

    def empty_document(self, schedule_fields: Optional[Dict[str, Any]] = None) -> RuleDocument:
        """Envelope with an outer group that has no inner groups."""
        return self.create_document(self.create_outer_group(), schedule_fields)
