"""Core exception types shared across layers."""


class RelayError(Exception):
    """Base class for errors raised inside the intent relay pipeline."""


class ClassificationError(RelayError):
    """Raised when the classifier backend fails or returns an unusable verdict."""


class HandlerError(RelayError):
    """Raised by a leaf handler for a failure that should surface as a sub-result error."""


class EmptyCompositeError(RelayError):
    """Raised when a composite intent decomposes into zero sub-requests."""


class PostProcessError(RelayError):
    """Raised when the post-processing step cannot transform a message."""


class RequestCancelledError(RelayError):
    """Raised inside a handler when its request was cancelled mid-flight."""


class FatalConfigurationError(RelayError):
    """Raised when an unregistered handler kind reaches the task registry."""


__all__ = [
    "RelayError",
    "ClassificationError",
    "HandlerError",
    "EmptyCompositeError",
    "PostProcessError",
    "RequestCancelledError",
    "FatalConfigurationError",
]
