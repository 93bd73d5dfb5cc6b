"""Models shared with the host that invokes the remap action."""

from typing import List, Optional
from pydantic import BaseModel, Field

from crdremap.codes import RemapReason


class ResourceSelector(BaseModel):
    """Which resources an action applies to.

    Selection is by group-qualified resource only; CRDs are cluster-scoped,
    so there is no namespace filter.
    """
    included_resources: List[str] = Field(default_factory=list)  # group-qualified, e.g. "customresourcedefinition.apiextensions.k8s.io"
    excluded_resources: List[str] = Field(default_factory=list)  # for hosts composing selectors; empty here

    def matches_resource(self, group_resource: str) -> bool:
        """Check a group-qualified resource name against the include/exclude lists.

        An empty include list or "*" includes everything; exclusions win.
        """
        name = group_resource.lower()
        excluded = {r.lower() for r in self.excluded_resources}
        if name in excluded or "*" in excluded:
            return False
        included = {r.lower() for r in self.included_resources}
        return not included or "*" in included or name in included


class ResourceIdentifier(BaseModel):
    """Reference to another resource an action wants backed up alongside the item."""
    group_resource: str
    namespace: str = ""
    name: str


class RemapDecision(BaseModel):
    """Outcome of evaluating one CRD."""
    crd_name: str
    original_api_version: Optional[str] = None
    api_version: Optional[str] = None
    schema_absent: bool
    non_structural_schema: bool
    remapped: bool
    reasons: List[RemapReason] = Field(default_factory=list)
