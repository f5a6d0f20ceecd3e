from abc import ABC, abstractmethod

from app.metadata.models import AIMetadata


class BaseMetadataProvider(ABC):
    """One entry of the prioritized provider chain."""

    name: str

    @abstractmethod
    def generate(self, text: str, filename: str) -> AIMetadata:
        """Produce title, description, tags and category for a document.

        Raises:
            ProviderNotConfiguredError: if the provider has no credentials.
            MetadataProviderError: on network errors or unusable responses.
        """
