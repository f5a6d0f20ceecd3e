"""AI-backed metadata provider: prompt, call, parse, validate."""

import json
import re
from pathlib import Path

from app.logging.logger import Log
from app.metadata.base import BaseMetadataProvider
from app.metadata.categories import CATEGORIES
from app.metadata.client_base import BaseMetadataClient
from app.metadata.exceptions import MetadataProviderError, ProviderNotConfiguredError
from app.metadata.models import AIMetadata
from app.metadata.prompt_loader import load_prompt_template, load_system_prompt
from app.metadata.validator import validate_and_build

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class AIMetadataProvider(BaseMetadataProvider):
    """Generates metadata through one chat client.

    A provider built without a client is unconfigured: it stays in the chain
    but fails fast with ProviderNotConfiguredError.
    """

    def __init__(
        self,
        *,
        name: str,
        client: BaseMetadataClient | None,
        model: str,
        temperature: float = 0.3,
        max_tokens: int = 300,
        content_limit: int = 4000,
        prompt_template_path: Path | None = None,
    ) -> None:
        self.name = name
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._content_limit = content_limit
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._system_prompt = load_system_prompt()

    @property
    def configured(self) -> bool:
        return self._client is not None

    def generate(self, text: str, filename: str) -> AIMetadata:
        if self._client is None:
            raise ProviderNotConfiguredError(f"{self.name} is not configured")

        prompt = self._build_prompt(text, filename)
        Log.debug(f"{self.name} metadata prompt:\n{prompt}")
        raw_response = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
        )
        Log.debug(f"{self.name} raw response:\n{raw_response}")
        return validate_and_build(self.parse_json(raw_response))

    def _build_prompt(self, text: str, filename: str) -> str:
        return self._prompt_template.format(
            filename=filename,
            content=text[: self._content_limit],
            categories=json.dumps(list(CATEGORIES)),
        )

    @staticmethod
    def parse_json(raw: str) -> dict[str, object]:
        """Pull the outermost JSON object out of a model reply (fences and chatter allowed)."""
        if not raw or not raw.strip():
            raise MetadataProviderError("Empty response")
        match = _JSON_OBJECT.search(raw)
        if match is None:
            raise MetadataProviderError("No JSON found in response")
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as exc:
            raise MetadataProviderError(f"Invalid JSON: {exc}") from exc
        if not isinstance(parsed, dict):
            raise MetadataProviderError("JSON response must be an object")
        return parsed
