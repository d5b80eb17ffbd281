"""Gemini client for structured portfolio generation."""

from __future__ import annotations

from typing import Any

from etf_portfolio_server.providers.http import ProviderError, post_json

BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.7,
        timeout_seconds: float = 30.0,
        max_retries: int = 2,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries

    @property
    def endpoint(self) -> str:
        return f"{BASE_URL}/{self.model}:generateContent"

    def build_payload(self, prompt: str, response_schema: dict[str, Any] | None = None) -> dict[str, Any]:
        generation_config: dict[str, Any] = {
            "responseMimeType": "application/json",
            "temperature": self.temperature,
        }
        if response_schema is not None:
            generation_config["responseSchema"] = response_schema
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }

    def generate_content(self, prompt: str, response_schema: dict[str, Any] | None = None) -> str:
        """Send one prompt and return the concatenated text of the first candidate."""
        data = post_json(
            self.endpoint,
            self.build_payload(prompt, response_schema),
            provider="gemini",
            timeout_seconds=self.timeout_seconds,
            headers={"x-goog-api-key": self.api_key},
            max_retries=self.max_retries,
        )
        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not isinstance(candidates, list) or not candidates:
            raise ProviderError("gemini", "BAD_RESPONSE", "Gemini returned no candidates.")
        content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            raise ProviderError("gemini", "BAD_RESPONSE", "Gemini candidate has no content parts.")
        texts = [part.get("text") for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)]
        if not texts:
            raise ProviderError("gemini", "BAD_RESPONSE", "Gemini candidate has no text.")
        return "".join(texts).strip()
