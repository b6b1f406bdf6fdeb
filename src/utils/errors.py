"""Custom exception types for consistent error handling."""


class FirestoreUnavailableError(Exception):
    """Raised when Firestore queries fail or are unavailable."""


class InvalidInputError(Exception):
    """Raised when graph input (criteria, probe, reports) fails validation."""


class LLMError(Exception):
    """Raised when photo analysis fails or returns unusable output."""


class GraphExecutionError(Exception):
    """Raised when a graph fails to compile or execute."""
