from dataclasses import dataclass
from typing import ClassVar

from app.config.settings import Settings
from app.metadata.base import BaseMetadataProvider
from app.metadata.client_base import BaseMetadataClient
from app.metadata.example_client_adapter import ExampleClientAdapter
from app.metadata.generator import MetadataGenerator
from app.metadata.openai_client_adapter import OpenAIClientAdapter
from app.metadata.provider import AIMetadataProvider


@dataclass(frozen=True)
class ProviderDefaults:
    base_url: str | None
    content_limit: int = 4000
    requires_key: bool = True
    json_mode: bool = True


class MetadataGeneratorFactory:
    """Builds the provider chain named by METADATA_PROVIDERS, in that order."""

    PROVIDERS: ClassVar[dict[str, ProviderDefaults]] = {
        "gemini": ProviderDefaults(
            base_url="https://generativelanguage.googleapis.com/v1beta/openai/",
        ),
        "groq": ProviderDefaults(base_url="https://api.groq.com/openai/v1"),
        "huggingface": ProviderDefaults(
            base_url="https://router.huggingface.co/v1",
            content_limit=2000,
            json_mode=False,
        ),
        "ollama": ProviderDefaults(
            base_url="http://localhost:11434/v1",
            content_limit=2000,
            requires_key=False,
        ),
        "openai": ProviderDefaults(base_url=None),
        "openrouter": ProviderDefaults(base_url="https://openrouter.ai/api/v1"),
    }

    @classmethod
    def create(cls, settings: Settings) -> MetadataGenerator:
        """Create the generator with every configured provider name, in priority order."""
        names = [
            name.strip().lower()
            for name in settings.metadata_providers.split(",")
            if name.strip()
        ]
        return MetadataGenerator([cls.create_provider(name, settings) for name in names])

    @classmethod
    def create_provider(cls, name: str, settings: Settings) -> BaseMetadataProvider:
        if name == "example":
            return AIMetadataProvider(
                name="example",
                client=ExampleClientAdapter(),
                model="example",
                temperature=0.0,
                max_tokens=settings.metadata_max_tokens,
            )

        defaults = cls.PROVIDERS.get(name)
        if defaults is None:
            supported = ["example", *sorted(cls.PROVIDERS)]
            raise ValueError(f"Unknown metadata provider '{name}'. Choose from: {supported}")

        return AIMetadataProvider(
            name=name,
            client=cls._build_client(name, defaults, settings),
            model=getattr(settings, f"metadata_{name}_model_name"),
            temperature=settings.metadata_temperature,
            max_tokens=settings.metadata_max_tokens,
            content_limit=defaults.content_limit,
        )

    @classmethod
    def _build_client(
        cls,
        name: str,
        defaults: ProviderDefaults,
        settings: Settings,
    ) -> BaseMetadataClient | None:
        api_key = (getattr(settings, f"metadata_{name}_api_key") or "").strip()
        if not api_key:
            if defaults.requires_key:
                return None
            api_key = name
        model = (getattr(settings, f"metadata_{name}_model_name") or "").strip()
        if not model:
            return None
        base_url = (getattr(settings, f"metadata_{name}_base_url") or "").strip()
        return OpenAIClientAdapter(
            api_key=api_key,
            timeout_seconds=getattr(settings, f"metadata_{name}_timeout_seconds"),
            base_url=base_url or defaults.base_url,
            json_mode=defaults.json_mode,
        )
