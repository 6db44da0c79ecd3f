"""
Ring assembly

Chains an unordered group of ways into closed rings. Ways are edges
between their first and last coordinates; chains are extended from their
open end with the first unconsumed way (in input order) that shares the
endpoint in either orientation.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Sequence, Iterable, Tuple
from loguru import logger

from .geometry import Coord, TracedWay, Ring, OpenChain


@dataclass
class RingAssemblyResult:
    """Closed rings plus the chains that could not be closed"""
    rings: List[Ring] = field(default_factory=list)
    open_chains: List[OpenChain] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.open_chains


class RingAssembler:
    """Assembles closed rings from way fragments"""

    def __init__(self, min_ring_coords: int = 4):
        self.min_ring_coords = min_ring_coords

    @staticmethod
    def _endpoint_index(ways: Sequence[TracedWay]) -> Dict[Coord, List[int]]:
        """Map each endpoint coordinate to the indices of ways ending there"""
        index: Dict[Coord, List[int]] = defaultdict(list)
        for i, way in enumerate(ways):
            index[way.start].append(i)
            if way.end != way.start:
                index[way.end].append(i)
        return index

    @staticmethod
    def _next_way(index: Dict[Coord, List[int]], consumed: List[bool], endpoint: Coord) -> Optional[int]:
        for i in index.get(endpoint, ()):
            if not consumed[i]:
                return i
        return None

    def assemble(self, ways: Sequence[TracedWay]) -> RingAssemblyResult:
        """
        Chain ways into rings

        Args:
            ways: Traced ways of one role group, in member order

        Returns:
            RingAssemblyResult with closed rings (first == last, at least
            min_ring_coords coordinates) and open or degenerate chains
        """
        result = RingAssemblyResult()
        ways = [w for w in ways if w.coords]
        index = self._endpoint_index(ways)
        consumed = [False] * len(ways)

        for first in range(len(ways)):
            if consumed[first]:
                continue
            consumed[first] = True
            start = ways[first]
            coords = list(start.coords)
            node_ids = list(start.node_ids)
            way_ids = [start.way_id]

            while not (len(coords) > 1 and coords[0] == coords[-1]):
                nxt = self._next_way(index, consumed, coords[-1])
                if nxt is None:
                    break
                consumed[nxt] = True
                way = ways[nxt]
                if way.start != coords[-1]:
                    way = way.reversed()
                # Shared endpoint is already the last chain coordinate
                coords.extend(way.coords[1:])
                node_ids.extend(way.node_ids[1:])
                way_ids.append(way.way_id)

            closed = len(coords) > 1 and coords[0] == coords[-1]
            if closed and len(coords) >= self.min_ring_coords:
                result.rings.append(Ring(coords, node_ids, way_ids))
            else:
                reason = "degenerate" if closed else "unclosed"
                logger.debug(f"Open chain over ways {way_ids} ({reason}, {len(coords)} coordinates)")
                result.open_chains.append(OpenChain(coords, node_ids, way_ids, reason))

        return result


def assemble_rings(
    members: Iterable[Tuple[TracedWay, str]],
    role_filter: Optional[str] = None,
    min_ring_coords: int = 4
) -> RingAssemblyResult:
    """
    Assemble rings from (traced way, role) pairs

    Only members whose role equals role_filter are used; with no filter
    every member is used.
    """
    ways = [way for way, role in members if role_filter is None or role == role_filter]
    return RingAssembler(min_ring_coords).assemble(ways)
