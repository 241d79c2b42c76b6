"""Tree assembler for pre-formed condition/action clusters."""

import logging
from typing import Any, Callable, Dict, List, Optional

from ..models import Cluster, RuleDocument
from .base_builder import BaseTreeBuilder, LeafInput, normalize_records

logger = logging.getLogger(__name__)

# Flattens one nested source (a condition or action node) into leaf records
Extractor = Callable[[Any], List[LeafInput]]


class GroupAssembler(BaseTreeBuilder):
    """Builds one inner group per cluster, preserving the input grouping."""

    def assemble(
        self,
        clusters: Optional[List[Cluster]],
        condition_extractor: Extractor,
        action_extractor: Extractor,
        schedule_fields: Optional[Dict[str, Any]] = None
    ) -> RuleDocument:
        """
        Build a rule document from clusters.

        Each cluster's condition sources are flattened in order, followed by
        the flattened action source when the cluster has one.

        Args:
            clusters: Ordered clusters
            condition_extractor: Source -> condition records
            action_extractor: Source -> action records
            schedule_fields: Field map attached under rules.schedule

        Returns:
            RuleDocument; never raises
        """
        clusters = normalize_records(clusters, "clusters")

        try:
            outer_group = self.create_outer_group()
            for cluster_index, cluster in enumerate(clusters):
                group = self.create_inner_group(cluster_index)

                for source in cluster.condition_sources:
                    self.append_leaves(group, normalize_records(condition_extractor(source), "conditions"))

                if cluster.has_action():
                    added = self.append_leaves(
                        group, normalize_records(action_extractor(cluster.action_source), "actions")
                    )
                    logger.debug(f"Added actions as siblings [group={cluster_index}, count={added}]")

                outer_group.children.append(group)
        except Exception as e:
            logger.error(f"Failed to build from condition groups [error={e}]", exc_info=True)
            return self.empty_document(schedule_fields)

        logger.info(f"Built rule tree from groups [outer_groups=1, inner_groups={len(outer_group.children)}]")
        return self.create_document(outer_group, schedule_fields)


def assemble_groups(
    clusters: Optional[List[Cluster]],
    condition_extractor: Extractor,
    action_extractor: Extractor,
    schedule_fields: Optional[Dict[str, Any]] = None
) -> RuleDocument:
    """Module-level shortcut for GroupAssembler().assemble()."""
    return GroupAssembler().assemble(clusters, condition_extractor, action_extractor, schedule_fields)
