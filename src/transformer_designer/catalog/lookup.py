"""Catalog Lookup Results

Every catalog accessor returns a LookupResult rather than a bare value so
that a fallback to a default entry is visible to the caller. The design
engine copies any attached UnknownKeyWarning into the result's warning list.
"""

import logging
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class UnknownKeyWarning:
    """Record of a catalog key that was not found.

    Attributes:
        catalog: Name of the catalog that was queried
        requested: Key the caller asked for
        fallback: Key that was used instead
    """
    catalog: str
    requested: str
    fallback: str

    @property
    def message(self) -> str:
        return (
            f"Unknown {self.catalog} '{self.requested}', "
            f"using default '{self.fallback}'"
        )


@dataclass(frozen=True)
class LookupResult(Generic[T]):
    """Value returned by a catalog lookup plus an optional fallback warning."""
    key: str
    value: T
    warning: Optional[UnknownKeyWarning] = None

    @property
    def is_fallback(self) -> bool:
        return self.warning is not None


def lookup(
    catalog: str,
    table: Mapping[str, Any],
    key: str,
    default_key: str,
) -> LookupResult:
    """Look up a key in a catalog table, falling back to a default entry.

    Keys are matched exactly first, then case-insensitively.

    Args:
        catalog: Catalog name used in the warning message
        table: Catalog mapping
        key: Requested key
        default_key: Key used when the requested one is unknown

    Returns:
        LookupResult carrying the matched entry
    """
    if key in table:
        return LookupResult(key=key, value=table[key])

    folded = {str(k).lower(): k for k in table}
    if key is not None and str(key).lower() in folded:
        matched = folded[str(key).lower()]
        return LookupResult(key=matched, value=table[matched])

    warning = UnknownKeyWarning(catalog=catalog, requested=str(key), fallback=default_key)
    logger.warning(warning.message)
    return LookupResult(key=default_key, value=table[default_key], warning=warning)
