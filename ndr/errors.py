class InvalidInputError(ValueError):
    """Raised when a caller hands the core something it can never accept.

    Not retryable: it points at a programming defect, not a transient state.
    """


class InvalidResourceRequest(InvalidInputError):
    """A resource request named an unknown kind or a negative/non-integer amount."""
