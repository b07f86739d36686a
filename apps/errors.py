class WardPulseError(Exception):
    """Base exception for the ward pulse dashboard."""


class DataShapeError(WardPulseError, ValueError):
    """Count payload does not have the aggregate + 50 ward entries shape."""


class NotFoundError(WardPulseError, KeyError):
    """A ward layer was restyled before it was built."""


class LayerAlreadyBuiltError(WardPulseError, ValueError):
    """A ward layer was built twice in the same session."""


class CountFetchError(WardPulseError):
    """The count source could not be reached or returned an error."""


class ServiceIndexError(WardPulseError, IndexError):
    """Service index outside the catalog."""


class CatalogError(WardPulseError):
    """Service catalog missing or malformed."""


class GeometryError(WardPulseError):
    """Ward boundary file missing or malformed."""
