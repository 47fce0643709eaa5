"\"\"\"Pydantic configuration schema for settings YAML input.\"\"\""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class CoreConfig(BaseModel):
    ensemble_weights: dict[str, float] | None = None
    confidence: dict[str, float] | None = None

    model_config = ConfigDict(extra="forbid")


class ValidatorSettings(BaseModel):
    boolean: dict[str, Any] | None = None
    outreach: dict[str, Any] | None = None
    general: dict[str, Any] | None = None
    platform: dict[str, Any] | None = None
    job_description: dict[str, Any] | None = None
    default_category: str | None = None

    model_config = ConfigDict(extra="forbid")


class ModelTierSettings(BaseModel):
    model: str
    temperature: float = Field(default=0.2, ge=0, le=2)
    max_output_tokens: int = Field(default=800, gt=0)
    timeout: float = Field(default=20.0, gt=0)


class CrossCheckSettings(BaseModel):
    enabled: bool = True
    tier: ModelTierSettings | None = None
    high_stakes: int = Field(default=85, ge=0, le=100)
    max_divergence: int = Field(default=15, ge=0, le=100)


class LLMSettings(BaseModel):
    tiers: list[ModelTierSettings] | None = None
    cross_check: CrossCheckSettings | None = None
    embedding_timeout: float | None = Field(default=None, gt=0)
    embedding_dimensions: int | None = Field(default=None, gt=0)


class AppConfig(BaseModel):
    core: CoreConfig = Field(default_factory=CoreConfig)
    scoring: dict[str, Any] | None = None
    validators: ValidatorSettings = Field(default_factory=ValidatorSettings)
    corpus: dict[str, Any] | None = None
    integrity: dict[str, Any] | None = None
    gaming: dict[str, Any] | None = None
    review: dict[str, Any] | None = None
    curator: dict[str, Any] | None = None
    llm: LLMSettings = Field(default_factory=LLMSettings)

    model_config = ConfigDict(extra="forbid")

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        core = self.core.model_dump(exclude_none=True)
        if core:
            settings["core"] = core
        validators = self.validators.model_dump(exclude_none=True)
        if validators:
            settings["validators"] = validators
        for section in ("scoring", "corpus", "integrity", "gaming", "review", "curator"):
            value = getattr(self, section)
            if value:
                settings[section] = value
        llm = self.llm.model_dump(exclude_none=True)
        if llm:
            settings["llm"] = llm
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
