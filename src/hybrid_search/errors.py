"""Exception types raised across the ingestion and search layers."""


class HybridSearchError(Exception):
    """Base class for all hybrid search errors."""


class ValidationError(HybridSearchError, ValueError):
    """A chunk record was rejected at the store boundary."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class ProviderError(HybridSearchError):
    """An embedding or binary-encoding capability failed or misbehaved."""


class StoreError(HybridSearchError):
    """The underlying database rejected a write."""
