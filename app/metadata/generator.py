"""Prioritized metadata provider chain with a local fallback that never fails."""

from collections.abc import Sequence

from app.logging.logger import Log
from app.metadata.base import BaseMetadataProvider
from app.metadata.exceptions import ProviderNotConfiguredError
from app.metadata.local_analyzer import LocalMetadataAnalyzer
from app.metadata.models import DocumentMetadata


class MetadataGenerator:
    """Tries each provider in order and returns the first usable answer.

    Every provider failure (unconfigured, network, malformed or incomplete
    JSON) is logged and the next provider is tried. When the chain is
    exhausted the local analyzer produces the metadata.
    """

    def __init__(
        self,
        providers: Sequence[BaseMetadataProvider],
        analyzer: LocalMetadataAnalyzer | None = None,
    ) -> None:
        self._providers = list(providers)
        self._analyzer = analyzer or LocalMetadataAnalyzer()

    @property
    def provider_names(self) -> list[str]:
        return [provider.name for provider in self._providers]

    def generate(self, content: str, filename: str, file_type: str) -> DocumentMetadata:
        for provider in self._providers:
            try:
                ai_metadata = provider.generate(content, filename)
            except ProviderNotConfiguredError as exc:
                Log.debug(f"Skipping {provider.name}: {exc}")
                continue
            except Exception as exc:
                Log.warning(f"{provider.name} failed: {exc}")
                continue

            Log.info(f"Used {provider.name} for metadata")
            return self._analyzer.enrich(ai_metadata, content, file_type, provider.name)

        Log.info("Using smart local processing for metadata")
        return self._analyzer.analyze(content, filename, file_type)
