"""Public API for crdremap.

High-level functions that run the remap action the way a backup host would:
select CRDs, execute the action on each, and collect the decisions.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field

from crdremap.contracts import RemapDecision
from crdremap.kernel.remap import Logger, RemapCRDVersionAction


class RemapRunResult(BaseModel):
    """Result of remapping a batch of documents."""
    documents: List[Any]  # All documents in input order, CRDs possibly remapped
    decisions: List[RemapDecision] = Field(default_factory=list)  # One per CRD, in input order
    skipped: int = 0  # Documents the action does not apply to

    @property
    def remapped_count(self) -> int:
        return sum(1 for d in self.decisions if d.remapped)


def group_resource_of(document: Mapping[str, Any]) -> str:
    """Derive the group-qualified resource name of a document.

    "apiextensions.k8s.io/v1" + "CustomResourceDefinition" gives
    "customresourcedefinition.apiextensions.k8s.io". Core resources have no
    group suffix.
    """
    if not isinstance(document, Mapping):
        return ""
    kind = document.get("kind")
    api_version = document.get("apiVersion")
    if not isinstance(kind, str) or not kind:
        return ""
    group = ""
    if isinstance(api_version, str) and "/" in api_version:
        group = api_version.split("/", 1)[0]
    resource = kind.lower()
    return f"{resource}.{group}" if group else resource


def remap_crd_version(resource: Dict[str, Any], logger: Optional[Logger] = None) -> Dict[str, Any]:
    """
    Remap a single CRD document in place and return it.

    Raises:
        ProjectionError: If the document is not CRD-shaped
    """
    item, _ = RemapCRDVersionAction(logger).execute(resource)
    return item


def remap_documents(documents: Iterable[Any], logger: Optional[Logger] = None) -> RemapRunResult:
    """
    Run the remap action over a batch of documents.

    Documents the action does not apply to pass through untouched.
    A ProjectionError on any CRD aborts the batch; no retries are attempted.

    Args:
        documents: Resource documents (CRDs and anything else)
        logger: Logger injected into the action

    Returns:
        RemapRunResult with documents in input order and one decision per CRD
    """
    log = logger if logger is not None else logging.getLogger(__name__)
    action = RemapCRDVersionAction(log)
    selector = action.applies_to()

    out: List[Any] = []
    decisions: List[RemapDecision] = []
    skipped = 0
    for doc in documents:
        group_resource = group_resource_of(doc)
        if not group_resource or not selector.matches_resource(group_resource):
            skipped += 1
            out.append(doc)
            continue
        item, decision = action.execute_with_decision(doc)
        decisions.append(decision)
        out.append(item)

    return RemapRunResult(documents=out, decisions=decisions, skipped=skipped)
