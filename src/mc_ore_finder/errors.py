"""Error taxonomy for the prediction core."""


class OreFinderError(Exception):
    """Base class for every error raised by the prediction core."""


class InvalidSeedFormat(OreFinderError, ValueError):
    """Raised when a seed string is empty."""


class InvalidSearchRequest(OreFinderError, ValueError):
    """Raised before scanning when a request is out of range or selects nothing."""


class SearchCancelled(OreFinderError):
    """Raised when the caller cancels a running search."""
