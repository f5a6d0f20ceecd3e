class MetadataError(Exception):
    """Raised when metadata generation fails."""


class ProviderNotConfiguredError(MetadataError):
    """Raised when a provider in the chain has no credentials or endpoint."""


class MetadataProviderError(MetadataError):
    """Raised when a provider call fails or returns an unusable response."""


class MetadataNetworkError(MetadataProviderError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""


class MetadataValidationError(MetadataProviderError):
    """Raised when the provider JSON misses required fields or has wrong types."""
