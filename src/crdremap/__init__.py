"""crdremap: restore-compatible API versions for backed-up CRDs."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("crdremap")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from crdremap.api import remap_crd_version, remap_documents, RemapRunResult
from crdremap.codes import RemapReason
from crdremap.contracts import RemapDecision, ResourceIdentifier, ResourceSelector
from crdremap.errors import ManifestError, ProjectionError
from crdremap.kernel.crd import CRDView, project_crd
from crdremap.kernel.remap import LEGACY_API_VERSION, RemapCRDVersionAction

__all__ = [
    "__version__",
    "remap_crd_version",
    "remap_documents",
    "RemapRunResult",
    "RemapReason",
    "RemapDecision",
    "ResourceIdentifier",
    "ResourceSelector",
    "ManifestError",
    "ProjectionError",
    "CRDView",
    "project_crd",
    "LEGACY_API_VERSION",
    "RemapCRDVersionAction",
]
