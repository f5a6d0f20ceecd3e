"""Example metadata client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseMetadataClient and register the provider in MetadataGeneratorFactory.
"""

import json
from typing import ClassVar

from app.metadata.client_base import BaseMetadataClient


class ExampleClientAdapter(BaseMetadataClient):
    """Returns a fixed valid metadata JSON without any network calls.

    Useful for local development and tests where no AI provider is reachable.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "title": "Example Document",
        "description": "Metadata produced by the offline example provider.",
        "tags": ["example", "document"],
        "category": "other",
    }

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        _ = model, temperature, max_tokens, system_prompt, user_prompt
        return json.dumps(self.DEFAULT_RESPONSE)
