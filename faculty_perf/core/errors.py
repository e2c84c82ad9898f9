# faculty_perf/core/errors.py

class PerformanceError(Exception):
    """Base class for errors raised while scoring faculty performance."""


class InvalidInput(PerformanceError):
    """Missing faculty, malformed period or academic-year label."""


class DataAccessError(PerformanceError):
    """The activity store could not be read (network, permission, timeout)."""
