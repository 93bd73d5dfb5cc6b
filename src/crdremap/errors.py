"""Error types raised by crdremap."""

from typing import List, Optional, Tuple


class ProjectionError(ValueError):
    """A resource could not be interpreted as a CustomResourceDefinition.

    Raised before any mutation takes place, so the document passed in is
    left exactly as it was. Retrying with the same input fails the same way.
    """

    def __init__(self, message: str, field: str = "<root>", errors: Optional[List[Tuple[str, str]]] = None):
        super().__init__(message)
        self.field = field  # Dotted path of the first offending field
        self.errors = list(errors or [])  # (path, message) pairs


class ManifestError(ValueError):
    """A manifest file could not be read or parsed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
