"""Request bodies accepted by the JSON API (camelCase on the wire)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CreateTranslationRequest(_ApiModel):
    key: str = Field(min_length=1)
    file: str = Field(min_length=1)
    translations: dict[str, str]


class UpdateTranslationRequest(_ApiModel):
    key: str | None = None
    file: str | None = None
    translations: dict[str, str] | None = None


class AutoTranslateRequest(_ApiModel):
    source_language: str | None = Field(default=None, alias="sourceLanguage")
    target_languages: list[str] | None = Field(default=None, alias="targetLanguages")


class TranslateOnlyRequest(AutoTranslateRequest):
    text: str = ""


class BatchTranslateRequest(AutoTranslateRequest):
    ids: list[int] = Field(default_factory=list)


class CreateFileRequest(_ApiModel):
    file_name: str = Field(default="", alias="fileName")


__all__ = [
    "AutoTranslateRequest",
    "BatchTranslateRequest",
    "CreateFileRequest",
    "CreateTranslationRequest",
    "TranslateOnlyRequest",
    "UpdateTranslationRequest",
]
