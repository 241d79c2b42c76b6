"""Rule builders for assembling the condition/action tree."""

from .base_builder import BaseTreeBuilder
from .tree_builder import TreeAssembler, assemble
from .group_builder import GroupAssembler, assemble_groups
from .rule_json_builder import RuleJsonBuilder

__all__ = [
    "BaseTreeBuilder",
    "TreeAssembler",
    "GroupAssembler",
    "RuleJsonBuilder",
    "assemble",
    "assemble_groups",
]
