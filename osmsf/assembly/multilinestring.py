"""
Multilinestring composition

Non-polygon relations are split by member role: one multilinestring per
(relation, distinct role). Member ways are traced separately and never
chained.
"""

from dataclasses import dataclass
from typing import List, Optional

from ..config import AssemblyConfig, get_config
from ..osm.models import OSMRelation
from .geometry import LineString, MultiLineString, label_for
from .tracer import WayTracer


@dataclass
class RoleFeature:
    """Multilinestring of one role within a relation"""
    label: str
    role: str
    geometry: MultiLineString


class MultilinestringComposer:
    """Composes non-polygon relations into role-grouped multilinestrings"""

    def __init__(self, tracer: WayTracer, config: Optional[AssemblyConfig] = None):
        self.tracer = tracer
        self.config = config or get_config().assembly

    def role_label(self, relation_id: int, role: str) -> str:
        return label_for(relation_id, role or self.config.no_role_label)

    def compose(self, relation: OSMRelation) -> List[RoleFeature]:
        """
        Trace every member way, grouped by role in sorted role order

        The empty role is a role of its own and is labelled "(no role)".
        """
        referrer = f"relation {relation.id}"
        features = []
        for role in relation.roles():
            lines = []
            for member in relation.members_with_role(role):
                traced = self.tracer.trace_id(member.way_id, referrer)
                lines.append(LineString(traced.coords, traced.node_ids, traced.way_id))
            features.append(RoleFeature(self.role_label(relation.id, role), role, MultiLineString(lines)))
        return features
