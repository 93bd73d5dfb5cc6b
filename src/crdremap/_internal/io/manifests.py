"""Manifest I/O helpers (internal).

Reads and writes Kubernetes manifests as plain dicts. Key order is kept
on both paths, scalars are not reinterpreted, and `kind: List` wrappers or
JSON arrays are written back in the shape they were read in.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from crdremap.errors import ManifestError


YAML_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class ManifestLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps as strings.

    The API server serializes timestamps as RFC 3339 strings; loading them as
    datetime would change their text on dump and break JSON output.
    """


ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != YAML_TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass
class Manifest:
    """Parsed manifest: top-level objects as read, in input order.

    `documents` returns the resources inside them by reference, so in-place
    changes to a document show up when the roots are dumped again.
    """
    roots: List[Any] = field(default_factory=list)

    @property
    def documents(self) -> List[Any]:
        documents: List[Any] = []
        for root in self.roots:
            documents.extend(_unwrap(root))
        return documents


def _unwrap(obj: Any) -> List[Any]:
    """Items of a JSON array or `kind: List` wrapper; otherwise the object itself."""
    if isinstance(obj, list):
        return obj
    if isinstance(obj, dict) and obj.get("kind") == "List" and isinstance(obj.get("items"), list):
        return obj["items"]
    return [obj]


def parse_manifest(text: str, fmt: str = "yaml") -> Manifest:
    """Parse manifest text. fmt is "yaml" (multi-document) or "json"."""
    if fmt == "json":
        try:
            return Manifest(roots=[json.loads(text)])
        except json.JSONDecodeError as e:
            raise ManifestError(f"Invalid JSON: {e}")

    try:
        loaded = list(yaml.load_all(text, Loader=ManifestLoader))
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML: {e}")

    # Empty documents between separators are dropped
    return Manifest(roots=[obj for obj in loaded if obj is not None])


def load_manifest(path: Union[str, Path]) -> Manifest:
    """
    Load a manifest from a .json, .yaml or .yml file.

    Raises:
        ManifestError: If the file is missing or cannot be parsed
    """
    p = Path(path)
    if not p.is_file():
        raise ManifestError(f"Manifest not found: {p}", path=str(p))

    with open(p, 'r', encoding='utf-8') as f:
        text = f.read()

    fmt = "json" if p.suffix == ".json" else "yaml"
    try:
        return parse_manifest(text, fmt)
    except ManifestError as e:
        raise ManifestError(f"{p}: {e}", path=str(p)) from e


def dump_manifest(manifest: Manifest, fmt: str = "yaml") -> str:
    """
    Serialize a manifest as a YAML stream or as JSON.

    JSON output is the single root when there is one, otherwise an array of roots.

    Raises:
        ManifestError: If a value cannot be represented in the output format
    """
    if fmt == "json":
        roots = manifest.roots
        payload: Any = roots[0] if len(roots) == 1 else roots
        try:
            return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as e:
            raise ManifestError(f"Cannot serialize manifest as JSON: {e}")
    if fmt != "yaml":
        raise ValueError(f"Unsupported output format: {fmt}")
    try:
        return yaml.safe_dump_all(manifest.roots, sort_keys=False, default_flow_style=False)
    except yaml.YAMLError as e:
        raise ManifestError(f"Cannot serialize manifest as YAML: {e}")


def write_report(decisions: List[Dict[str, Any]], path: Union[str, Path]) -> None:
    """Write remap decisions as an indented JSON report."""
    with open(path, 'w', encoding='utf-8') as f:
        json.dump({"decisions": decisions}, f, indent=2, ensure_ascii=False)
        f.write("\n")
