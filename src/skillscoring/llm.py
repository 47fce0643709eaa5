"""Generative scoring: rubric prompt construction, model clients and tier fallback."""

from __future__ import annotations

import asyncio
import json
import re
from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence
from urllib import error, parse, request

import structlog
from pydantic import ValidationError

from .core.validators import ValidationResult
from .errors import SchemaParseError, SignalUnavailable
from .schemas import GameDefinition, ModelScoreResult, Submission

MAX_PROMPT_CHARS = 5000

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

RESPONSE_CONTRACT = """Respond with ONLY a JSON object, no markdown, in exactly this shape:
{
  "score": <integer 0-100>,
  "dimensions": {"technicalAccuracy": <0-100>, "creativity": <0-100>, "completeness": <0-100>, "clarity": <0-100>, "bestPractices": <0-100>},
  "skillsRadar": {"<skill>": <0-100>},
  "rubricBreakdown": {"<criterion name>": {"points": <number>, "maxPoints": <number>, "reasoning": "<one sentence>"}},
  "strengths": ["<1-5 items>"],
  "improvements": ["<1-5 items>"],
  "feedback": "<2-4 sentence narrative>"
}"""

_DIFFICULTY_GUIDELINES = {
    "easy": [
        "90-100: Fully meets every requirement with clear, practical reasoning",
        "70-89: Meets most requirements with minor gaps",
        "50-69: Partially addresses the task",
        "Below 50: Misses core requirements",
    ],
    "medium": [
        "90-100: Strategic, thorough and well-justified across all criteria",
        "70-89: Solid approach with some depth missing",
        "50-69: Basic approach lacking strategic depth",
        "Below 50: Incomplete or off-target",
    ],
    "hard": [
        "90-100: Expert-level, comprehensive with measurable outcomes",
        "70-89: Strong but misses advanced considerations",
        "50-69: Competent but not expert-level",
        "Below 50: Falls well short of expert expectations",
    ],
}


@dataclass
class ModelTier:
    model: str
    temperature: float = 0.2
    max_output_tokens: int = 800
    timeout: float = 20.0


DEFAULT_TIERS: tuple[ModelTier, ...] = (
    ModelTier(model="gemini-2.5-flash", temperature=0.35),
    ModelTier(model="gemini-2.5-flash-lite"),
    ModelTier(model="gemini-3-flash"),
)


@dataclass
class CrossCheckConfig:
    """Second opinion on high-stakes scores from an independent model."""

    enabled: bool = True
    tier: ModelTier = field(default_factory=lambda: ModelTier(model="gemini-2.5-flash-lite", temperature=0.35))
    high_stakes: int = 85
    max_divergence: int = 15


def build_scoring_prompt(
    *,
    game: GameDefinition,
    submission: Submission,
    validation: ValidationResult,
    max_chars: int = MAX_PROMPT_CHARS,
) -> str:
    """Construct the rubric-grounded prompt; the JSON contract always survives truncation."""

    rubric_lines = [
        f"- {criterion.name} ({criterion.max_points} pts): {criterion.description}"
        for criterion in game.effective_rubric()
    ]
    checks = ", ".join(f"{name}={'pass' if passed else 'fail'}" for name, passed in validation.checks.items())
    sections = [
        f"You are an expert recruiting-skills assessor scoring a {submission.skill_category} submission.",
        f"TASK: {game.title}\n{game.task or game.description}".strip(),
        f"SKILL CONTEXT: category={submission.skill_category}, difficulty={submission.difficulty}",
        "RUBRIC:\n" + "\n".join(rubric_lines),
        "SUBMISSION:\n" + submission.text,
        "AUTOMATED VALIDATION RESULTS:\n"
        f"Score: {validation.score}/100\n"
        f"Feedback: {'; '.join(validation.feedback)}\n"
        f"Checks: {checks or 'none'}\n"
        f"Strengths: {'; '.join(validation.strengths) or 'none'}",
        f"GENERAL SCORING GUIDELINES ({submission.difficulty.upper()} DIFFICULTY):\n"
        + "\n".join(_DIFFICULTY_GUIDELINES[submission.difficulty]),
    ]
    body = "\n\n".join(sections)
    budget = max_chars - len(RESPONSE_CONTRACT) - 2
    if len(body) > budget:
        marker = "\n[truncated]"
        body = body[: max(0, budget - len(marker))] + marker
    return f"{body}\n\n{RESPONSE_CONTRACT}"


def parse_model_response(raw: str, *, model: str | None = None) -> ModelScoreResult:
    """Parse and strictly validate a model response."""

    text = _FENCE.sub("", raw.strip()).strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise SchemaParseError(["response is not JSON"], model=model) from None
        try:
            data = json.loads(text[start : end + 1])
        except json.JSONDecodeError as exc:
            raise SchemaParseError([f"invalid JSON: {exc.msg}"], model=model) from exc
    if not isinstance(data, dict):
        raise SchemaParseError(["response must be a JSON object"], model=model)
    try:
        result = ModelScoreResult.model_validate(data)
    except ValidationError as exc:
        messages = [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()]
        raise SchemaParseError(messages, model=model) from exc
    return result.model_copy(update={"model": model})


class ModelClient(Protocol):
    def generate(self, prompt: str, *, tier: ModelTier) -> str | None:
        """Return raw model text, or ``None`` when the call produced nothing."""


class HTTPModelClient:
    """Minimal generateContent client for hosted models."""

    def __init__(self, endpoint: str | None, api_key: str | None = None):
        self._endpoint = endpoint.rstrip("/") if endpoint else None
        self._api_key = api_key
        self._logger = structlog.get_logger(__name__)

    def generate(self, prompt: str, *, tier: ModelTier) -> str | None:
        if not self._endpoint:
            return None
        url = f"{self._endpoint}/models/{tier.model}:generateContent"
        if self._api_key:
            url = f"{url}?{parse.urlencode({'key': self._api_key})}"
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": tier.temperature,
                "maxOutputTokens": tier.max_output_tokens,
                "responseMimeType": "application/json",
            },
        }
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        req = request.Request(url, data=data, headers={"Content-Type": "application/json"}, method="POST")
        try:
            with request.urlopen(req, timeout=tier.timeout) as resp:
                body = resp.read().decode("utf-8")
        except error.URLError as exc:  # pragma: no cover - network path
            self._logger.warning("llm.request_failed", model=tier.model, error=str(exc))
            return None
        if not body:
            return None
        return _extract_text(json.loads(body))


def _extract_text(payload: dict[str, Any]) -> str | None:
    candidates = payload.get("candidates") or []
    if not candidates:
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    return text or None


class GenerativeScorer:
    """Tries model tiers in order; the first schema-valid answer wins."""

    def __init__(
        self,
        client: ModelClient | None,
        tiers: Sequence[ModelTier] | None = None,
        *,
        cross_check: CrossCheckConfig | None = None,
    ) -> None:
        self._client = client
        self._tiers = list(tiers or DEFAULT_TIERS)
        self._cross_check = cross_check or CrossCheckConfig()
        self._logger = structlog.get_logger(__name__)

    @property
    def tiers(self) -> list[ModelTier]:
        return list(self._tiers)

    async def score(
        self,
        *,
        game: GameDefinition,
        submission: Submission,
        validation: ValidationResult,
    ) -> ModelScoreResult | None:
        if self._client is None:
            return None
        prompt = build_scoring_prompt(game=game, submission=submission, validation=validation)
        for tier in self._tiers:
            try:
                result = await self._attempt(prompt, tier)
            except asyncio.TimeoutError:
                self._logger.warning("generative.tier_failed", model=tier.model, reason="timeout")
            except SchemaParseError as exc:
                self._logger.warning("generative.tier_failed", model=tier.model, reason="schema", errors=exc.errors)
            except SignalUnavailable as exc:
                self._logger.warning("generative.tier_failed", model=tier.model, reason=exc.message)
            except Exception as exc:  # noqa: BLE001
                self._logger.warning("generative.tier_failed", model=tier.model, reason="error", error=str(exc))
            else:
                return await self._verify(prompt, result)
        self._logger.warning("generative.unavailable", tiers=[tier.model for tier in self._tiers])
        return None

    async def _verify(self, prompt: str, result: ModelScoreResult) -> ModelScoreResult:
        """Re-score high-stakes results with the check tier; averages when the two diverge."""

        cfg = self._cross_check
        if not cfg.enabled or result.score < cfg.high_stakes or result.model == cfg.tier.model:
            return result
        try:
            check = await self._attempt(prompt, cfg.tier)
        except Exception as exc:  # noqa: BLE001
            self._logger.warning("generative.cross_check_failed", model=cfg.tier.model, error=str(exc))
            return result
        update: dict[str, Any] = {"cross_check_model": check.model, "cross_check_score": check.score}
        divergence = abs(result.score - check.score)
        if divergence > cfg.max_divergence:
            update["score"] = int(round((result.score + check.score) / 2))
            update["consistency_flags"] = ["cross_check_divergence"]
            self._logger.info(
                "generative.cross_check_divergence",
                primary=result.score,
                check=check.score,
                final=update["score"],
            )
        else:
            update["consistency_flags"] = ["cross_check_passed"]
        return result.model_copy(update=update)

    async def _attempt(self, prompt: str, tier: ModelTier) -> ModelScoreResult:
        assert self._client is not None
        raw = await asyncio.wait_for(
            asyncio.to_thread(self._client.generate, prompt, tier=tier),
            tier.timeout,
        )
        if not raw or not raw.strip():
            raise SignalUnavailable("generative", "empty model response", model=tier.model)
        return parse_model_response(raw, model=tier.model)
