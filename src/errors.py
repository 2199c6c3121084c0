"""
Error types shared by the topic sources, content services and the pipeline.

Only InputValidationError is meant to reach a caller. The others are raised
inside a component and converted to a fallback at that component's boundary.
"""


class HotTopicsError(Exception):
    """Base class for application errors."""


class InputValidationError(HotTopicsError, ValueError):
    """A required request field is missing or empty."""


class UpstreamUnavailable(HotTopicsError):
    """An external dependency could not be reached or refused the request."""


class ParseFailure(HotTopicsError):
    """An external dependency answered with a body we could not use."""
