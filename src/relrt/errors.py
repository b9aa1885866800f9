"""
Exceptions raised by relrt.

All faults are fatal and propagated synchronously; the numerical code
never retries.
"""


class TransferError(Exception):
    """Base class for errors raised while processing a hit."""
    pass


class MissingMetricError(TransferError):
    """A geometry-dependent operation was invoked without a metric."""
    pass


class IncompatibleOptionsError(TransferError, ValueError):
    """Two requested options use mutually exclusive layouts."""
    pass


class CoordinateKindError(TransferError, ValueError):
    """The metric uses a coordinate system the helper does not support."""
    pass
