"""
Multipolygon composition

Builds one multipolygon per polygon-forming relation from its "outer"
and "inner" member ways.
"""

from typing import List, Optional
from loguru import logger
from shapely.errors import GEOSException

from ..config import AssemblyConfig, get_config
from ..errors import UnclosedRing
from ..osm.models import OSMRelation
from .geometry import MultiPolygon, Polygon, Ring
from .report import AssemblyReport
from .rings import RingAssembler
from .tracer import WayTracer


class MultipolygonComposer:
    """Composes polygon relations into multipolygons"""

    def __init__(
        self,
        tracer: WayTracer,
        config: Optional[AssemblyConfig] = None,
        report: Optional[AssemblyReport] = None
    ):
        self.tracer = tracer
        self.config = config or get_config().assembly
        self.report = report if report is not None else AssemblyReport()
        self.assembler = RingAssembler(self.config.min_ring_coords)

    def compose(self, relation: OSMRelation) -> MultiPolygon:
        """
        Assemble a polygon relation into a multipolygon

        Every member way is traced, so an unresolved way or node aborts the
        pass. Members with a role other than outer/inner are reported and
        left out of the rings.

        Raises:
            UnresolvedReference: member way or node missing from the store
            UnclosedRing: some chain could not be closed, or no exterior ring
        """
        referrer = f"relation {relation.id}"
        outer_ways = []
        inner_ways = []
        other_roles = []
        for member in relation.members:
            traced = self.tracer.trace_id(member.way_id, referrer)
            if member.role == self.config.outer_role:
                outer_ways.append(traced)
            elif member.role == self.config.inner_role:
                inner_ways.append(traced)
            else:
                other_roles.append(member)

        if other_roles:
            detail = ", ".join(f"way {m.way_id} role '{m.role}'" for m in other_roles)
            logger.warning(f"Relation {relation.id}: {len(other_roles)} member(s) without outer/inner role excluded ({detail})")
            self.report.add("unknown_role", referrer, detail)

        outer = self.assembler.assemble(outer_ways)
        inner = self.assembler.assemble(inner_ways)

        open_chains = outer.open_chains + inner.open_chains
        if open_chains:
            raise UnclosedRing(relation.id, open_chains)
        if not outer.rings:
            raise UnclosedRing(relation.id, [], reason="no exterior ring")

        if self.config.hole_assignment == "first_exterior":
            polygons = self._attach_to_first(outer.rings, inner.rings)
        else:
            polygons = self._attach_by_containment(relation.id, outer.rings, inner.rings)

        logger.debug(f"Relation {relation.id}: {len(outer.rings)} exterior ring(s), {len(inner.rings)} hole(s)")
        return MultiPolygon(polygons)

    @staticmethod
    def _attach_to_first(exteriors: List[Ring], holes: List[Ring]) -> List[Polygon]:
        polygons = [Polygon([ring]) for ring in exteriors]
        polygons[0].rings.extend(holes)
        return polygons

    def _attach_by_containment(self, relation_id: int, exteriors: List[Ring], holes: List[Ring]) -> List[Polygon]:
        """Attach each hole to the smallest exterior containing it"""
        polygons = [Polygon([ring]) for ring in exteriors]
        if not holes:
            return polygons

        shapes = [ring.to_shapely() for ring in exteriors]
        for hole in holes:
            target = None
            try:
                probe = hole.to_shapely().representative_point()
                candidates = [i for i, shape in enumerate(shapes) if shape.contains(probe)]
                if candidates:
                    target = min(candidates, key=lambda i: shapes[i].area)
            except GEOSException as e:
                logger.warning(f"Relation {relation_id}: containment test failed for hole {hole.label}: {e}")

            if target is None:
                logger.warning(f"Relation {relation_id}: hole {hole.label} lies in no exterior, attached to the first")
                self.report.add("unassigned_hole", f"relation {relation_id}", f"ways {hole.label}")
                target = 0
            polygons[target].rings.append(hole)

        return polygons
