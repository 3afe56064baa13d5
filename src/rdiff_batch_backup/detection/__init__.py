"""Source detection: work out what kind of storage a task points at."""

from .models import SourceKind
from .resolver import resolve_source, validate_destination

__all__ = [
    "SourceKind",
    "resolve_source",
    "validate_destination",
]
