"""HTTP client for the chat-completion provider.

One POST per call, no retries. Failures never propagate: they come back
as a JSON error string so the HTTP layer can pass them straight through.
"""

import json

import httpx

from doc_structurer.utils.config import ConfigurationError, LLMConfig
from doc_structurer.utils.logger import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = "You are a highly accurate data extraction and transformation assistant."


def error_payload(message: str) -> str:
    """Return the ``{"error": message}`` string used for all structuring failures."""
    return json.dumps({"error": message})


class CompletionResponseError(ValueError):
    """The provider replied, but not with a usable completion."""


class StructuringClient:
    """Sends prompts to an OpenAI-compatible chat-completions endpoint.

    Args:
        api_key: Bearer credential. Must be non-empty.
        api_url: Full chat-completions URL.
        model: Model identifier sent with every request.
        http_client: Optional preconfigured ``httpx.Client``. The caller keeps
            ownership of it; ``close`` only closes a client created here.
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.openai.com/v1/chat/completions",
        model: str = "gpt-4o",
        http_client: httpx.Client | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("StructuringClient requires an API key")
        self._api_key = api_key
        self.api_url = api_url
        self.model = model
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client()

    @classmethod
    def from_config(cls, config: LLMConfig) -> "StructuringClient":
        return cls(
            api_key=config.require_api_key(),
            api_url=config.api_url,
            model=config.model,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def build_payload(self, prompt: str) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        }

    def complete(self, prompt: str) -> str:
        """Return the model's completion for ``prompt``.

        On any failure returns ``{"error": "Failed to process request: ..."}``
        instead of raising.
        """
        try:
            resp = self._client.post(
                self.api_url,
                json=self.build_payload(prompt),
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
            resp.raise_for_status()
            content = self._parse_completion(resp.json())
        except Exception as exc:
            logger.error("Completion request failed: %s", exc)
            return error_payload(f"Failed to process request: {exc}")

        logger.info("Completion received (%d characters)", len(content))
        return content

    @staticmethod
    def _parse_completion(body: dict) -> str:
        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise CompletionResponseError(f"Malformed completion response: {exc!r}") from exc
        if not isinstance(content, str):
            raise CompletionResponseError("Completion content is not a string")
        return content
