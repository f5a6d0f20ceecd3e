import httpx
import openai

from app.metadata.client_base import BaseMetadataClient
from app.metadata.exceptions import MetadataNetworkError, MetadataProviderError


class OpenAIClientAdapter(BaseMetadataClient):
    """Metadata client built on the OpenAI-compatible chat API.

    Gemini, Groq, Hugging Face, Ollama and OpenRouter all expose this API, so
    one adapter serves every remote provider; only base URL and key differ.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
        json_mode: bool = True,
    ) -> None:
        self._json_mode = json_mode
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        extra: dict[str, object] = {}
        if self._json_mode:
            extra["response_format"] = {"type": "json_object"}
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                **extra,  # type: ignore[arg-type]
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise MetadataNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise MetadataNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise MetadataProviderError("AI returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise MetadataProviderError("AI returned empty response")
        return content
