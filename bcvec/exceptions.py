"""
Error kinds raised by the loading, projection and aggregation stages.
"""


class BcvecError(Exception):
    """Base class for all bcvec errors."""


class SourceUnavailable(BcvecError):
    """An authoritative source could not be read and nothing was cached."""

    def __init__(self, source: str, reason: str = ""):
        self.source = source
        self.reason = reason
        message = f"Source unavailable: {source}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class SchemaMismatch(BcvecError):
    """Expected columns, value kinds or geometry types are absent."""


class UnsupportedCrsError(BcvecError):
    """A CRS could not be resolved to transformation parameters."""


class NonMetricCrsError(BcvecError):
    """A metric operation was requested on a geographic or non-metre CRS."""


class CrsMismatchError(BcvecError):
    """Two collections combined by one operation do not share a CRS."""


class ZeroReferenceAreaError(BcvecError):
    """A reference feature has zero area so no coverage percentage exists."""

    def __init__(self, keys):
        self.keys = list(keys)
        super().__init__(f"Reference area is zero for: {self.keys}")


class ConfigError(BcvecError):
    """The analysis configuration is missing a section or has a bad value."""
