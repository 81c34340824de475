"""
Exceptions raised by the Lenia core.

Numerical anomalies and malformed seed patterns are recovered locally and
never show up here. Only bad configuration and a failed buffer allocation
reach the caller.
"""


class LeniaError(Exception):
    """Base class for all lenia_field errors."""


class ConfigurationError(LeniaError, ValueError):
    """A species name or parameter set was rejected.

    The engine keeps the previously valid configuration when this is raised.
    """


class FieldAllocationError(LeniaError):
    """The field buffers could not be allocated. Fatal at startup."""
