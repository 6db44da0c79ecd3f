"""
Converter exceptions

Structural failures abort the pass (UnresolvedReference, ShapeMismatch,
InvalidCategory). UnclosedRing is raised per relation and handled by the
pipeline, which excludes the relation and records it in the assembly report.
"""

from typing import Any, List, Optional


class OSMDataError(Exception):
    """Base class for conversion errors"""


class UnresolvedReference(OSMDataError):
    """A way or relation references an id absent from the entity store"""

    def __init__(self, kind: str, ref_id: int, referrer: Optional[str] = None):
        self.kind = kind
        self.ref_id = ref_id
        self.referrer = referrer
        message = f"Unresolved {kind} reference {ref_id}"
        if referrer:
            message += f" in {referrer}"
        super().__init__(message)


class UnclosedRing(OSMDataError):
    """A chain of relation member ways could not be closed into a ring"""

    def __init__(self, relation_id: int, chains: List[Any], reason: str = "unclosed ring"):
        self.relation_id = relation_id
        self.chains = chains
        self.reason = reason
        super().__init__(f"Relation {relation_id}: {reason} ({len(chains)} chain(s))")


class ShapeMismatch(OSMDataError):
    """Parallel geometry, label or attribute arrays disagree in length"""

    def __init__(self, category: str, feature_index: Optional[int], detail: str):
        self.category = category
        self.feature_index = feature_index
        self.detail = detail
        where = f"{category} feature {feature_index}" if feature_index is not None else category
        super().__init__(f"Shape mismatch in {where}: {detail}")


class InvalidCategory(OSMDataError, ValueError):
    """Way assembly requested with an unsupported geometry kind"""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"geometry type must be POLYGON or LINESTRING, got {value!r}")
