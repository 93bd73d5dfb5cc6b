"""Remap CRD apiVersion to v1beta1 for CRDs authored against the legacy API.

A CRD read back from the cluster is always served as apiextensions.k8s.io/v1,
even when it was created through v1beta1. Restoring such a CRD as v1 fails
when it lacks a structural per-version schema, so the backup copy is demoted
to v1beta1 when either of these holds:

- the first spec.versions entry has no schema.openAPIV3Schema
  (v1beta1 lets all versions share one schema and lets it be empty;
  v1 requires a schema on every version), or
- status.conditions carries a NonStructuralSchema condition.

The document is never promoted to v1.
"""

import logging
from typing import Any, List, Mapping, MutableMapping, Optional, Tuple, Union

from crdremap.codes import RemapReason
from crdremap.contracts import RemapDecision, ResourceIdentifier, ResourceSelector
from crdremap.kernel.crd import CRDView, project_crd


LEGACY_API_VERSION = "apiextensions.k8s.io/v1beta1"
NON_STRUCTURAL_SCHEMA = "NonStructuralSchema"
CRD_RESOURCE = "customresourcedefinition.apiextensions.k8s.io"

PLUGIN_NAME = "RemapCRDVersionAction"

Logger = Union[logging.Logger, logging.LoggerAdapter]


def schema_absent(view: CRDView) -> bool:
    """True if the first version has no schema or no openAPIV3Schema.

    Only the first entry is consulted: all versions of one stored CRD come
    from the same API generation.
    """
    if not view.versions:
        return False
    return not view.versions[0].has_openapi_schema()


def non_structural_schema(view: CRDView) -> bool:
    """True if any condition is of type NonStructuralSchema, whatever its status."""
    return any(c.type == NON_STRUCTURAL_SCHEMA for c in view.conditions)


def _api_version_of(item: Mapping[str, Any]) -> Optional[str]:
    value = item.get("apiVersion")
    if value is None or isinstance(value, str):
        return value
    return str(value)


class RemapCRDVersionAction:
    """Backup item action that demotes legacy CRDs to apiextensions.k8s.io/v1beta1."""

    def __init__(self, logger: Optional[Logger] = None):
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def applies_to(self) -> ResourceSelector:
        """Only CRDs are handled; the host filters everything else out."""
        return ResourceSelector(included_resources=[CRD_RESOURCE])

    def decide(self, item: Mapping[str, Any]) -> RemapDecision:
        """
        Evaluate both predicates without touching the item.

        Raises:
            ProjectionError: If the item is not CRD-shaped
        """
        return self._decide(item, project_crd(item))

    def _decide(self, item: Mapping[str, Any], view: CRDView) -> RemapDecision:
        absent = schema_absent(view)
        non_structural = non_structural_schema(view)

        reasons: List[RemapReason] = []
        if absent:
            reasons.append(RemapReason.SCHEMA_ABSENT)
        if non_structural:
            reasons.append(RemapReason.NON_STRUCTURAL_SCHEMA)

        original = _api_version_of(item)
        remapped = bool(reasons)
        return RemapDecision(
            crd_name=view.name,
            original_api_version=original,
            api_version=LEGACY_API_VERSION if remapped else original,
            schema_absent=absent,
            non_structural_schema=non_structural,
            remapped=remapped,
            reasons=reasons,
        )

    def execute(
        self,
        item: MutableMapping[str, Any],
        backup: Optional[Mapping[str, Any]] = None,
    ) -> Tuple[MutableMapping[str, Any], List[ResourceIdentifier]]:
        """
        Demote the item's apiVersion in place when it looks like a v1beta1 CRD.

        Args:
            item: CRD document, already selected by the host via applies_to()
            backup: Backup record the item belongs to (log context only)

        Returns:
            Tuple of (item, additional items). Additional items is always empty.

        Raises:
            ProjectionError: If the item is not CRD-shaped; the item is not modified
        """
        item, _ = self.execute_with_decision(item, backup)
        return item, []

    def execute_with_decision(
        self,
        item: MutableMapping[str, Any],
        backup: Optional[Mapping[str, Any]] = None,
    ) -> Tuple[MutableMapping[str, Any], RemapDecision]:
        """Same as execute(), returning the decision (taken before mutation) instead of additional items."""
        self.logger.info("Executing %s", PLUGIN_NAME)

        view = project_crd(item)

        base = self.logger
        extra = {}
        if isinstance(base, logging.LoggerAdapter):
            # Nested adapters drop the outer extra, so flatten onto the wrapped logger
            extra.update(base.extra or {})
            base = base.logger
        extra.update({"plugin": PLUGIN_NAME, "crd": view.name})
        backup_name = ((backup or {}).get("metadata") or {}).get("name")
        if backup_name:
            extra["backup"] = backup_name
        log = logging.LoggerAdapter(base, extra)

        decision = self._decide(item, view)
        if decision.schema_absent:
            log.debug("CRD is a candidate for v1beta1 backup")
        if decision.non_structural_schema:
            log.debug("CRD is a non-structural schema")

        if decision.remapped:
            item["apiVersion"] = LEGACY_API_VERSION

        return item, decision
