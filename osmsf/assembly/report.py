"""
Data-quality report collected during a conversion pass
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any


@dataclass
class AssemblyIssue:
    """One recovered data-quality condition"""
    kind: str           # unclosed_ring, missing_exterior, unknown_role, unassigned_hole, dropped_keys
    entity: str         # e.g. "relation 42"
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "entity": self.entity, "detail": self.detail}


@dataclass
class AssemblyReport:
    """Issues recorded while assembling, plus ids excluded from output"""
    issues: List[AssemblyIssue] = field(default_factory=list)
    excluded_relations: List[int] = field(default_factory=list)

    def add(self, kind: str, entity: str, detail: str = "") -> None:
        self.issues.append(AssemblyIssue(kind, entity, detail))

    def of_kind(self, kind: str) -> List[AssemblyIssue]:
        return [i for i in self.issues if i.kind == kind]

    def summary(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for issue in self.issues:
            counts[issue.kind] = counts.get(issue.kind, 0) + 1
        return counts

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)
