from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Difficulty = Literal["easy", "medium", "hard"]

MAX_SUBMISSION_CHARS = 10_000
MAX_HINTS = 3


class RubricCriterion(BaseModel):
    """Single rubric line with its point allocation."""

    name: str
    max_points: int = Field(gt=0)
    description: str = ""

    model_config = ConfigDict(extra="forbid")


DEFAULT_RUBRICS: dict[str, list[RubricCriterion]] = {
    "easy": [
        RubricCriterion(name="Team Strategy", max_points=30, description="Clear collaborative approach and division of work"),
        RubricCriterion(name="Core Requirements", max_points=25, description="Addresses all key task requirements"),
        RubricCriterion(name="Platform Understanding", max_points=25, description="Demonstrates platform-specific knowledge"),
        RubricCriterion(name="Completeness", max_points=20, description="Comprehensive and well-structured response"),
    ],
    "medium": [
        RubricCriterion(name="Advanced Team Strategy", max_points=25, description="Sophisticated collaborative approach with clear ownership"),
        RubricCriterion(name="Strategic Depth", max_points=30, description="In-depth analysis with multiple angles and approaches"),
        RubricCriterion(name="Platform Expertise", max_points=25, description="Advanced platform features and best practices"),
        RubricCriterion(name="Innovation & Optimization", max_points=20, description="Creative solutions and process optimization"),
    ],
    "hard": [
        RubricCriterion(name="Expert Team Coordination", max_points=25, description="Masterful collaboration with specialized roles"),
        RubricCriterion(name="Comprehensive Strategy", max_points=30, description="Multi-layered approach covering all aspects"),
        RubricCriterion(name="Advanced Platform Mastery", max_points=25, description="Expert-level platform knowledge and techniques"),
        RubricCriterion(name="Strategic Excellence", max_points=20, description="Industry-leading approach with measurable outcomes"),
    ],
}


class ValidationConfig(BaseModel):
    """Per-game knobs for the rule-based validators."""

    keywords: list[str] = Field(default_factory=list)
    location: str | None = None
    location_required: bool = False
    strict_keyword_match: bool = False
    allow_implicit_and: bool = False
    recognize_phrases_as_proximity: bool = True
    synonym_map: dict[str, list[str]] = Field(default_factory=dict)
    max_words: int = 150
    min_words: int | None = None
    recommended_min_words: int | None = None
    min_sentences: int | None = None
    min_chars: int | None = None
    must_mention: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class SeedReference(BaseModel):
    """Curated exemplar answer shipped with a game definition."""

    text: str = Field(min_length=1)
    score: int = Field(default=90, ge=0, le=100)

    model_config = ConfigDict(extra="forbid")


class GameDefinition(BaseModel):
    """Read-only game metadata served by the game registry."""

    game_id: str
    title: str = ""
    description: str = ""
    task: str = ""
    skill_category: str = "general"
    difficulty: Difficulty = "medium"
    rubric: list[RubricCriterion] = Field(default_factory=list)
    example_solution: str | None = None
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    references: list[SeedReference] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def effective_rubric(self) -> list[RubricCriterion]:
        return list(self.rubric) or list(DEFAULT_RUBRICS[self.difficulty])

    @property
    def has_example(self) -> bool:
        return bool(self.example_solution and self.example_solution.strip())


class ScoringRequest(BaseModel):
    """Inbound submission as received from the transport layer."""

    game_id: str = Field(min_length=1)
    player_id: str = Field(min_length=1)
    submission_text: str
    team_id: str | None = None
    skill_category: str | None = None
    difficulty: Difficulty | None = None
    hints_used: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid")

    @field_validator("submission_text")
    @classmethod
    def _check_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("submission text must not be blank")
        if len(value) > MAX_SUBMISSION_CHARS:
            raise ValueError(f"submission text exceeds {MAX_SUBMISSION_CHARS} characters")
        return value

    @field_validator("hints_used")
    @classmethod
    def _cap_hints(cls, value: int) -> int:
        return min(value, MAX_HINTS)


class Submission(BaseModel):
    """Request-scoped view of a submission resolved against its game."""

    text: str
    game_id: str
    skill_category: str
    difficulty: Difficulty
    hints_used: int = 0

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_request(cls, request: ScoringRequest, game: GameDefinition) -> "Submission":
        return cls(
            text=request.submission_text.strip(),
            game_id=game.game_id,
            skill_category=request.skill_category or game.skill_category,
            difficulty=request.difficulty or game.difficulty,
            hints_used=request.hints_used,
        )
