"""Read-only projection of a CustomResourceDefinition document.

The projection only names the fields the remap decision needs. Unknown
fields are ignored rather than rejected, so documents carrying newer or
vendor-specific fields still project cleanly. The projection is never
written back: mutation always happens on the original mapping.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from crdremap.errors import ProjectionError


PROJECTION_ERROR_PREFIX = "unable to convert unstructured item to CRD"


def _null_as_empty(v: Any) -> Any:
    """A null string field projects as its zero value, like a missing key."""
    return "" if v is None else v


class CRDValidation(BaseModel):
    """The `schema` block of a CRD version."""
    open_api_v3_schema: Optional[Dict[str, Any]] = Field(None, alias="openAPIV3Schema")

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class CRDVersion(BaseModel):
    """One entry of spec.versions."""
    name: str = ""
    validation: Optional[CRDValidation] = Field(None, alias="schema")  # "schema" shadows BaseModel

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    name_null_as_empty = field_validator('name', mode='before')(_null_as_empty)

    def has_openapi_schema(self) -> bool:
        """True if both the schema block and its openAPIV3Schema are present."""
        return self.validation is not None and self.validation.open_api_v3_schema is not None


class CRDCondition(BaseModel):
    """One entry of status.conditions. Only type and status are projected."""
    type: str = ""
    status: str = ""

    model_config = ConfigDict(extra="ignore", frozen=True)

    fields_null_as_empty = field_validator('type', 'status', mode='before')(_null_as_empty)


class _Metadata(BaseModel):
    name: str = ""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name_null_as_empty = field_validator('name', mode='before')(_null_as_empty)


class _Spec(BaseModel):
    versions: Optional[List[CRDVersion]] = None  # null is treated like a missing key

    model_config = ConfigDict(extra="ignore", frozen=True)


class _Status(BaseModel):
    conditions: Optional[List[CRDCondition]] = None

    model_config = ConfigDict(extra="ignore", frozen=True)


class _CRDDocument(BaseModel):
    """Wire shape of the parts of a CRD the projection reads."""
    metadata: Optional[_Metadata] = None
    spec: Optional[_Spec] = None
    status: Optional[_Status] = None

    model_config = ConfigDict(extra="ignore", frozen=True)


class CRDView(BaseModel):
    """Typed, read-only view of a CRD.

    Created fresh per decision and discarded afterwards.
    """
    name: str = ""
    versions: Tuple[CRDVersion, ...] = ()
    conditions: Tuple[CRDCondition, ...] = ()

    model_config = ConfigDict(frozen=True)


def _format_loc(loc: Tuple[Any, ...]) -> str:
    """Render a pydantic error location as a dotted path (e.g. status.conditions[1].type)."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or "<root>"


def _projection_error(exc: ValidationError) -> ProjectionError:
    """Convert a pydantic ValidationError into a ProjectionError with field context."""
    errors = [(_format_loc(tuple(err["loc"])), err["msg"]) for err in exc.errors()]
    details = "; ".join(f"{path}: {msg}" for path, msg in errors)
    field = errors[0][0] if errors else "<root>"
    return ProjectionError(f"{PROJECTION_ERROR_PREFIX}: {details}", field=field, errors=errors)


def project_crd(resource: Mapping[str, Any]) -> CRDView:
    """
    Project a structured resource into a CRDView.

    Args:
        resource: The resource mapping as captured by the host

    Returns:
        CRDView over metadata.name, spec.versions and status.conditions

    Raises:
        ProjectionError: If a named field is present with the wrong shape
    """
    if not isinstance(resource, Mapping):
        raise ProjectionError(
            f"{PROJECTION_ERROR_PREFIX}: expected a mapping, got {type(resource).__name__}",
            errors=[("<root>", "expected a mapping")],
        )

    try:
        doc = _CRDDocument.model_validate(dict(resource))
    except ValidationError as e:
        raise _projection_error(e) from e

    metadata = doc.metadata or _Metadata()
    spec = doc.spec or _Spec()
    status = doc.status or _Status()

    return CRDView(
        name=metadata.name,
        versions=tuple(spec.versions or ()),
        conditions=tuple(status.conditions or ()),
    )
