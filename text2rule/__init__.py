"""text2rule - Assemble rule trees and schedule DSL from extracted condition/action records."""

from .models import (
    LeafRecord,
    TreeNode,
    RuleDocument,
    ScheduleRecord,
    Cluster,
    RuleNode,
)
from .tree_traverser import TreeTraverser
from .grouper import ConditionActionGrouper
from .rule_builders import (
    TreeAssembler,
    GroupAssembler,
    RuleJsonBuilder,
    assemble,
    assemble_groups,
)
from .schedule import (
    ScheduleExtractor,
    ScheduleSerializer,
    to_map,
    to_dsl,
    generate_typed_dsl,
)
from .json_extractor import extract_json

__all__ = [
    "LeafRecord",
    "TreeNode",
    "RuleDocument",
    "ScheduleRecord",
    "Cluster",
    "RuleNode",
    "TreeTraverser",
    "ConditionActionGrouper",
    "TreeAssembler",
    "GroupAssembler",
    "RuleJsonBuilder",
    "assemble",
    "assemble_groups",
    "ScheduleExtractor",
    "ScheduleSerializer",
    "to_map",
    "to_dsl",
    "generate_typed_dsl",
    "extract_json",
]
