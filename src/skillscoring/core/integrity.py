"\"\"\"Integrity and gaming assessment for a single submission.\"\"\""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

from rapidfuzz import fuzz

IntegrityRisk = Literal["low", "medium", "high"]
GamingRisk = Literal["none", "low", "medium", "high", "critical"]
GamingAction = Literal["allow", "warn", "penalize", "flag_review", "reject"]

FLAG_DESCRIPTIONS: dict[str, str] = {
    "exact_copy": "Submission is a copy of the example solution.",
    "near_identical_example": "Submission is nearly identical to the example solution.",
    "too_short": "Submission is too short to demonstrate the skill.",
    "repetitive_content": "Submission repeats the same sentences.",
    "unfilled_placeholders": "Submission contains unfilled template placeholders.",
    "keyword_stuffing": "Submission is padded with repeated keywords.",
    "ai_phrasing": "Submission reads like unedited assistant output.",
    "templated_high_score": "High score on a heavily templated answer.",
}

_PLACEHOLDERS = (
    re.compile(r"\[your\s+(answer|response|name|company|text)\]", re.IGNORECASE),
    re.compile(r"\{(name|company|role|position)\}", re.IGNORECASE),
    re.compile(r"\.\.\.\s*$"),
    re.compile(r"^e\.g\.,?\s", re.IGNORECASE),
    re.compile(r"lorem ipsum", re.IGNORECASE),
    re.compile(r"xxx+", re.IGNORECASE),
    re.compile(r"\[insert\s+", re.IGNORECASE),
    re.compile(r"<your\s+", re.IGNORECASE),
)
_INCOMPLETE = (
    re.compile(r"^(todo|tbd|incomplete)\b", re.IGNORECASE),
    re.compile(r"\(to be\s+(completed|filled|added)\)", re.IGNORECASE),
    re.compile(r"will\s+add\s+later", re.IGNORECASE),
)
_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_WHITESPACE = re.compile(r"\s+")

AI_PHRASES: dict[str, float] = {
    "as an ai": 0.9,
    "as a language model": 0.9,
    "i cannot provide": 0.63,
    "i hope this helps": 0.54,
    "certainly!": 0.51,
    "that's a great question": 0.51,
    "great question": 0.4,
    "thank you for asking": 0.4,
    "i'd be happy to": 0.43,
    "i understand your": 0.4,
    "feel free to ask": 0.28,
    "absolutely!": 0.24,
    "it is important to note": 0.08,
    "it is worth noting": 0.08,
    "in summary": 0.06,
    "to summarize": 0.06,
    "furthermore": 0.03,
    "moreover": 0.03,
    "in conclusion": 0.03,
}

SKILL_KEYWORDS: dict[str, list[str]] = {
    "boolean": ["boolean", "search", "operator", "query", "string", "filter", "syntax"],
    "xray": ["site", "inurl", "intitle", "filetype", "google", "xray", "linkedin", "resume"],
    "linkedin": ["linkedin", "profile", "connection", "inmail", "recruiter", "network", "talent"],
    "outreach": ["opportunity", "role", "team", "excited", "connect", "candidate", "position"],
    "general": ["candidate", "recruiting", "hiring", "talent", "sourcing", "strategy", "skills"],
}


@dataclass(frozen=True)
class WritingContext:
    """Expected register of a skill category; floors are in words."""

    min_words: int
    tolerate_ai_phrases: bool = False


WRITING_CONTEXTS: dict[str, WritingContext] = {
    "boolean": WritingContext(min_words=2),
    "xray": WritingContext(min_words=3),
    "outreach": WritingContext(min_words=10, tolerate_ai_phrases=True),
    "job-description": WritingContext(min_words=20, tolerate_ai_phrases=True),
    "screening": WritingContext(min_words=6, tolerate_ai_phrases=True),
    "negotiation": WritingContext(min_words=10, tolerate_ai_phrases=True),
    "diversity": WritingContext(min_words=15, tolerate_ai_phrases=True),
    "persona": WritingContext(min_words=6),
    "ats": WritingContext(min_words=10, tolerate_ai_phrases=True),
    "linkedin": WritingContext(min_words=6, tolerate_ai_phrases=True),
    "talent-intelligence": WritingContext(min_words=20, tolerate_ai_phrases=True),
    "ai-prompting": WritingContext(min_words=4, tolerate_ai_phrases=True),
    "multiplatform": WritingContext(min_words=10, tolerate_ai_phrases=True),
    "general": WritingContext(min_words=20),
}


def context_for(category: str | None, contexts: dict[str, WritingContext] | None = None) -> WritingContext:
    """Writing context for a category; unknown categories use ``general``."""
    table = contexts or WRITING_CONTEXTS
    context = table.get((category or "").lower()) or table.get("general") or WRITING_CONTEXTS["general"]
    if isinstance(context, dict):
        return WritingContext(**context)
    return context


def normalize_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text.lower()).strip()


def _ngrams(text: str, size: int = 3) -> set[str]:
    words = text.split()
    return {" ".join(words[i : i + size]) for i in range(len(words) - size + 1)}


@dataclass
class GamingConfig:
    """Detector thresholds and the risk blend."""

    risk_thresholds: dict[str, int] = field(
        default_factory=lambda: {"low": 20, "medium": 40, "high": 60, "critical": 80}
    )
    penalties: dict[str, int] = field(
        default_factory=lambda: {"none": 0, "low": 0, "medium": 5, "high": 15, "critical": 30}
    )
    detector_weights: dict[str, float] = field(
        default_factory=lambda: {"keyword_stuffing": 0.15, "ai_generated": 0.20, "copy_paste": 0.25, "low_effort": 0.10}
    )
    warning_density: float = 0.15
    critical_density: float = 0.25
    max_repetitions: int = 5
    ai_phrases_for_warning: int = 2
    ai_phrases_for_critical: int = 4
    ai_tolerance_factor: float = 0.5
    contexts: dict[str, WritingContext] = field(default_factory=lambda: dict(WRITING_CONTEXTS))
    copy_warning: float = 0.85
    copy_critical: float = 0.95
    reject_similarity: float = 0.98


@dataclass(slots=True)
class GamingAssessment:
    risk: GamingRisk = "none"
    risk_score: int = 0
    recommended_action: GamingAction = "allow"
    penalty: int = 0
    scores: dict[str, float] = field(default_factory=dict)
    signals: list[str] = field(default_factory=list)
    details: list[str] = field(default_factory=list)


class GamingDetector:
    """Heuristic detectors for keyword stuffing, assistant phrasing, low effort and copying."""

    def __init__(self, *, config: GamingConfig | None = None) -> None:
        self._config = config or GamingConfig()

    def detect(self, text: str, *, skill_category: str, example: str | None = None) -> GamingAssessment:
        normalized = normalize_text(text)
        words = normalized.split()
        details: list[str] = []
        signals: list[str] = []
        context = context_for(skill_category, self._config.contexts)
        copy_score, example_similarity = self._copy_paste(normalized, example, details)
        scores = {
            "keyword_stuffing": self._keyword_stuffing(words, skill_category, details, signals),
            "ai_generated": self._ai_phrasing(normalized, context, details, signals),
            "low_effort": self._low_effort(text, words, context, details),
            "copy_paste": copy_score,
        }
        risk_score = self._risk_score(scores)
        risk = self._risk_level(risk_score)
        action = self._action(risk, example_similarity)
        return GamingAssessment(
            risk=risk,
            risk_score=risk_score,
            recommended_action=action,
            penalty=self._config.penalties[risk],
            scores={name: round(value, 1) for name, value in scores.items()},
            signals=signals,
            details=details,
        )

    def _keyword_stuffing(self, words: list[str], category: str, details: list[str], signals: list[str]) -> float:
        cfg = self._config
        if not words:
            return 0.0
        keywords = set(SKILL_KEYWORDS.get(category, SKILL_KEYWORDS["general"]))
        counts: dict[str, int] = {}
        for word in words:
            clean = re.sub(r"[^\w]", "", word)
            if clean in keywords:
                counts[clean] = counts.get(clean, 0) + 1
        density = sum(counts.values()) / len(words)
        score = 0.0
        if density > cfg.critical_density:
            score = 80 + (density - cfg.critical_density) * 100
            details.append(f"Critical keyword density ({density:.0%})")
        elif density > cfg.warning_density:
            score = 40 + (density - cfg.warning_density) * 200
            details.append(f"Elevated keyword density ({density:.0%})")
        repeated = sorted(keyword for keyword, count in counts.items() if count > cfg.max_repetitions)
        if repeated:
            score += 20
            details.append(f"Repeated keywords: {', '.join(repeated)}")
        if len(words) > 30 and len(set(words)) / len(words) < 0.4:
            score += 15
            details.append("Low vocabulary diversity")
        score = min(100.0, score)
        if score >= 40:
            signals.append("keyword_stuffing")
        return score

    def _ai_phrasing(
        self, normalized: str, context: WritingContext, details: list[str], signals: list[str]
    ) -> float:
        cfg = self._config
        found = [phrase for phrase in AI_PHRASES if phrase in normalized]
        phrase_score = min(100.0, sum(AI_PHRASES[phrase] * 100 for phrase in found))
        score = 0.0
        if len(found) >= cfg.ai_phrases_for_critical:
            score = 70 + phrase_score * 0.3
        elif len(found) >= cfg.ai_phrases_for_warning or any(AI_PHRASES[p] >= 0.9 for p in found):
            score = 40 + phrase_score * 0.3
        if found:
            details.append(f"Assistant-style phrases: {', '.join(found)}")
        if score and context.tolerate_ai_phrases:
            score *= 1 - cfg.ai_tolerance_factor
            details.append("Formal register expected for this category")
        score = min(100.0, score)
        if score >= 40:
            signals.append("ai_phrasing")
        return score

    def _low_effort(self, text: str, words: list[str], context: WritingContext, details: list[str]) -> float:
        score = 0.0
        if len(words) < context.min_words:
            score = 60 + (context.min_words - len(words)) * 2
            details.append(f"Very short submission ({len(words)} words)")
        if any(pattern.search(text.strip()) for pattern in _PLACEHOLDERS):
            score += 30
            details.append("Contains unfilled placeholders")
        if any(pattern.search(text.strip()) for pattern in _INCOMPLETE):
            score += 40
            details.append("Submission appears incomplete")
        return min(100.0, score)

    def _copy_paste(self, normalized: str, example: str | None, details: list[str]) -> tuple[float, float]:
        cfg = self._config
        if not example:
            return 0.0, 0.0
        normalized_example = normalize_text(example)
        if normalized == normalized_example:
            details.append("Exact copy of example solution")
            return 100.0, 1.0
        submission_grams = _ngrams(normalized)
        example_grams = _ngrams(normalized_example)
        union = submission_grams | example_grams
        similarity = len(submission_grams & example_grams) / len(union) if union else 0.0
        if similarity >= cfg.copy_critical:
            details.append(f"Near-exact copy of example ({similarity:.0%} similar)")
            return 90.0, similarity
        if similarity >= cfg.copy_warning:
            details.append(f"High similarity to example solution ({similarity:.0%})")
            return min(100.0, 50 + (similarity - cfg.copy_warning) * 400), similarity
        return 0.0, similarity

    def _risk_score(self, scores: dict[str, float]) -> int:
        weights = self._config.detector_weights
        active = {name: value for name, value in scores.items() if value > 0}
        if not active:
            return 0
        total_weight = sum(weights.get(name, 0.0) for name in active)
        weighted = sum(value * weights.get(name, 0.0) for name, value in active.items())
        average = weighted / total_weight if total_weight else 0.0
        return int(round(average * 0.7 + max(active.values()) * 0.3))

    def _risk_level(self, risk_score: int) -> GamingRisk:
        thresholds = self._config.risk_thresholds
        for level in ("critical", "high", "medium", "low"):
            if risk_score >= thresholds[level]:
                return level  # type: ignore[return-value]
        return "none"

    def _action(self, risk: GamingRisk, example_similarity: float) -> GamingAction:
        if risk == "critical" or example_similarity >= self._config.reject_similarity:
            return "reject"
        return {
            "high": "flag_review",
            "medium": "penalize",
            "low": "warn",
        }.get(risk, "allow")  # type: ignore[return-value]


@dataclass
class IntegrityConfig:
    exact_similarity: float = 0.95
    exact_ratio: float = 97.0
    near_identical_similarity: float = 0.90
    min_words: int = 15
    contexts: dict[str, WritingContext] = field(default_factory=lambda: dict(WRITING_CONTEXTS))
    repetition_ratio: float = 0.6
    templated_ratio: float = 85.0
    templated_score: int = 80


@dataclass(slots=True)
class IntegrityAssessment:
    risk: IntegrityRisk = "low"
    is_exact_copy: bool = False
    flags: list[str] = field(default_factory=list)
    example_similarity: float = 0.0
    text_similarity: float = 0.0
    gaming: GamingAssessment = field(default_factory=GamingAssessment)

    def describe(self) -> list[str]:
        return [FLAG_DESCRIPTIONS.get(flag, flag) for flag in self.flags]


_ESCALATE: dict[IntegrityRisk, IntegrityRisk] = {"low": "medium", "medium": "high", "high": "high"}


class IntegrityEvaluator:
    """Classifies copy, low-effort and templating risk."""

    def __init__(
        self,
        *,
        config: IntegrityConfig | None = None,
        gaming: GamingDetector | None = None,
    ) -> None:
        self._config = config or IntegrityConfig()
        self._gaming = gaming or GamingDetector()

    def assess(
        self,
        text: str,
        *,
        example: str | None,
        example_similarity: float,
        provisional_score: int,
        skill_category: str = "general",
    ) -> IntegrityAssessment:
        cfg = self._config
        flags: list[str] = []
        normalized = normalize_text(text)
        normalized_example = normalize_text(example) if example else ""

        text_similarity = fuzz.ratio(normalized, normalized_example) / 100 if normalized_example else 0.0
        is_exact_copy = bool(normalized_example) and (
            normalized == normalized_example
            or text_similarity * 100 >= cfg.exact_ratio
            or example_similarity >= cfg.exact_similarity
        )
        if is_exact_copy:
            flags.append("exact_copy")
        elif normalized_example and max(example_similarity, text_similarity) > cfg.near_identical_similarity:
            flags.append("near_identical_example")

        low_effort: list[str] = []
        floor = min(cfg.min_words, context_for(skill_category, cfg.contexts).min_words)
        if len(normalized.split()) < floor:
            low_effort.append("too_short")
        sentences = [s.strip() for s in _SENTENCE_SPLIT.split(normalized) if s.strip()]
        if len(sentences) > 3 and len(set(sentences)) < len(sentences) * cfg.repetition_ratio:
            low_effort.append("repetitive_content")
        if any(pattern.search(text.strip()) for pattern in _PLACEHOLDERS):
            low_effort.append("unfilled_placeholders")
        flags.extend(low_effort)

        gaming = self._gaming.detect(text, skill_category=skill_category, example=example)
        flags.extend(signal for signal in gaming.signals if signal not in flags)

        if is_exact_copy:
            risk: IntegrityRisk = "high"
        elif len(low_effort) >= 2 or "near_identical_example" in flags:
            risk = "medium"
        else:
            risk = "low"

        templated = bool(normalized_example) and fuzz.token_sort_ratio(normalized, normalized_example) >= cfg.templated_ratio
        if (templated or "ai_phrasing" in gaming.signals) and provisional_score >= cfg.templated_score:
            flags.append("templated_high_score")
            risk = _ESCALATE[risk]
        if gaming.risk in ("high", "critical") and risk == "low":
            risk = "medium"

        return IntegrityAssessment(
            risk=risk,
            is_exact_copy=is_exact_copy,
            flags=flags,
            example_similarity=round(example_similarity, 4),
            text_similarity=round(text_similarity, 4),
            gaming=gaming,
        )
