"""Client for the chat-completions style translation provider."""

from __future__ import annotations

import json
from typing import Any, Sequence, Union

import httpx
from pydantic import BaseModel, Field, ValidationError, model_validator

from i18n_server.config import TranslationSettings
from i18n_server.logging import logger
from i18n_server.services.exceptions import (
    ProviderError,
    ProviderNotConfigured,
    ProviderResponseError,
)
from i18n_server.utils.retry import retry_async

DEFAULT_PROMPT = """\
You are a multilingual translation assistant.

You will receive a JSON string with two fields: "languages" and "content".
Translate the text in "content" into every language listed in "languages".

Requirements:
- Return only a JSON string, with no extra text or explanations.
- Use the language names exactly as given in "languages" as the output keys.
- The output JSON format must be:
{"result": {"<language>": "<translated text>"}}
- Example:
Input: {"languages": ["English", "Chinese"], "content": ["你好"]}
Output: {"result": {"English": "Hello", "Chinese": "你好"}}
- For Chinese (Traditional), use Hong Kong / Taiwan traditional characters and common phrasing.

Do not include any additional fields or information in the response."""

ERROR_DETAIL_CHAR_LIMIT = 500

TranslatedValue = Union[str, list[str]]
TranslationMap = dict[str, TranslatedValue]


class _ChatMessage(BaseModel):
    content: str


class _ChatChoice(BaseModel):
    message: _ChatMessage


class ChatCompletion(BaseModel):
    choices: list[_ChatChoice] = Field(min_length=1)


class TranslationPayload(BaseModel):
    """Structured body the prompt asks the model to answer with."""

    result: TranslationMap | list[TranslationMap] | None = None
    content: TranslationMap | list[TranslationMap] | None = None

    @model_validator(mode="after")
    def _require_variant(self) -> "TranslationPayload":
        if self.result is None and self.content is None:
            raise ValueError("payload must contain a 'result' or 'content' field")
        return self

    def translations(self) -> dict[str, str]:
        body = self.result if self.result is not None else self.content
        chunks = body if isinstance(body, list) else [body]
        merged: dict[str, str] = {}
        for chunk in chunks:
            for language, value in chunk.items():
                merged[language] = _flatten(value)
        return merged


def _flatten(value: TranslatedValue) -> str:
    if isinstance(value, str):
        return value
    if len(value) == 1:
        return value[0]
    return "\n".join(value)


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    lines = stripped.splitlines()[1:]
    if lines and lines[-1].strip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def parse_translation_response(body: Any) -> dict[str, str]:
    """Extract ``{language: text}`` from a chat-completion response body."""

    try:
        completion = ChatCompletion.model_validate(body)
    except ValidationError as exc:
        raise ProviderResponseError(f"Unexpected provider response shape: {exc.error_count()} error(s)") from exc

    content = _strip_code_fence(completion.choices[0].message.content)
    try:
        embedded = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ProviderResponseError(f"Provider message is not valid JSON: {exc.msg}") from exc

    try:
        payload = TranslationPayload.model_validate(embedded)
    except ValidationError as exc:
        raise ProviderResponseError(f"Provider message has an unexpected shape: {exc.error_count()} error(s)") from exc
    return payload.translations()


class TranslationProviderClient:
    """One POST per call; no retries unless ``max_attempts`` is raised."""

    def __init__(self, http_client: httpx.AsyncClient, settings: TranslationSettings | None = None) -> None:
        self._client = http_client
        self._settings = settings or TranslationSettings()

    @property
    def prompt(self) -> str:
        return self._settings.prompt or DEFAULT_PROMPT

    def build_request_body(self, target_languages: Sequence[str], source_texts: Sequence[str]) -> dict[str, Any]:
        query = {"languages": list(target_languages), "content": list(source_texts)}
        return {
            "model": self._settings.model,
            "messages": [
                {"role": "system", "content": self.prompt},
                {"role": "user", "content": json.dumps(query, ensure_ascii=False)},
            ],
        }

    async def translate(
        self,
        target_languages: Sequence[str],
        source_texts: Sequence[str] | str,
    ) -> dict[str, str]:
        api_url = self._settings.api_url
        authorization = self._settings.authorization_header()
        if not api_url or not authorization:
            raise ProviderNotConfigured("Translation API URL and API Key must be configured")

        texts = [source_texts] if isinstance(source_texts, str) else list(source_texts)
        body = self.build_request_body(target_languages, texts)
        headers = {"Authorization": authorization, "Content-Type": "application/json"}

        async def _request() -> httpx.Response:
            response = await self._client.post(
                str(api_url),
                json=body,
                headers=headers,
                timeout=self._settings.request_timeout_seconds,
            )
            response.raise_for_status()
            return response

        try:
            response = await retry_async(
                _request,
                max_attempts=self._settings.max_attempts,
                retry_on=(httpx.HTTPError,),
                logger=logger,
                operation_name="translation_provider_request",
            )
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text[:ERROR_DETAIL_CHAR_LIMIT]
            raise ProviderError(
                f"Translation request failed ({exc.response.status_code}): {detail}"
            ) from exc
        except httpx.RequestError as exc:
            raise ProviderError(f"Translation request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderResponseError("Provider response body is not JSON") from exc
        return parse_translation_response(data)


__all__ = [
    "DEFAULT_PROMPT",
    "ChatCompletion",
    "TranslationPayload",
    "TranslationProviderClient",
    "parse_translation_response",
]
