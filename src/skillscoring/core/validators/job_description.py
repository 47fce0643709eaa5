"\"\"\"Job description validator with inclusive-language checks.\"\"\""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ...schemas import ValidationConfig
from .base import ValidationResult, find_phrases, finalize, word_count

BIAS_TERMS: dict[str, dict[str, list[str]]] = {
    "severe": {
        "culture fit bias": ["culture fit", "cultural fit", "fit our culture"],
        "gendered pronoun": ["he will", "she will", "he should", "she should", "he must", "she must"],
        "age bias": ["young team", "young and energetic", "recent grad", "recent graduate", "digital native"],
    },
    "moderate": {
        "exclusionary jargon": ["rockstar", "rock star", "ninja", "guru", "wizard", "superhero"],
        "ability bias": ["must be able to stand", "able to lift", "stand for long periods"],
        "masculine-coded": ["aggressive", "dominant", "fearless"],
        "cultural assumption": ["native english speaker", "native speaker", "local candidates only"],
    },
    "mild": {
        "age assumption": ["energetic", "tech-savvy", "fresh perspective"],
        "gendered title": ["salesman", "chairman", "policeman", "fireman"],
    },
}

_ALTERNATIVES = {
    "culture fit bias": 'Use "culture add" or "values alignment".',
    "gendered pronoun": 'Use "they" or "the candidate will".',
    "age bias": "Focus on skills and experience, not age.",
    "exclusionary jargon": 'Use "expert", "specialist" or "senior engineer".',
    "ability bias": "Only list physical requirements that are essential job functions.",
    "masculine-coded": 'Balance with terms like "collaborative" or "analytical".',
    "cultural assumption": "Ask for language proficiency and work authorization instead.",
    "age assumption": "These terms can signal an age preference.",
    "gendered title": 'Use neutral titles such as "salesperson" or "chair".',
}

_SECTIONS = {
    "has_responsibilities": re.compile(r"\b(responsibilit\w*|you will|what you'll do)\b", re.IGNORECASE),
    "has_requirements": re.compile(r"\b(requirements?|qualifications?|must have|you have)\b", re.IGNORECASE),
    "has_benefits": re.compile(r"\b(benefits?|we offer|compensation|salary|perks?)\b", re.IGNORECASE),
}
_INCLUSION_SIGNALS = (
    (re.compile(r"\b(remote|hybrid|flexible location|distributed team)\b", re.IGNORECASE), 5, "Mentions remote or flexible work"),
    (re.compile(r"\b(reasonable accommodation|accessib\w+|equal opportunity employer)\b", re.IGNORECASE), 8, "Includes an accommodation or equal-opportunity statement"),
    (re.compile(r"\b(diverse|diversity|inclusion|inclusive|underrepresented)\b", re.IGNORECASE), 3, "Includes diversity and inclusion language"),
    (re.compile(r"\b(skills.?based|or equivalent|non.?traditional background)\b", re.IGNORECASE), 3, "Uses skills-based hiring language"),
)


@dataclass
class JobDescriptionConfig:
    severity_penalties: dict[str, int] = field(
        default_factory=lambda: {"severe": 10, "moderate": 7, "mild": 5}
    )
    missing_section_penalty: int = 10
    min_words: int = 60


class JobDescriptionValidator:
    """Flags biased language and checks the usual job-ad sections."""

    categories = ("job-description", "job_description")

    def __init__(self, *, config: JobDescriptionConfig | None = None) -> None:
        self._config = config or JobDescriptionConfig()

    def validate(self, text: str, config: ValidationConfig) -> ValidationResult:
        cfg = self._config
        feedback: list[str] = []
        strengths: list[str] = []
        checks: dict[str, bool] = {}
        score = 100

        found_any = False
        for severity, categories in BIAS_TERMS.items():
            for category, terms in categories.items():
                hits = find_phrases(text, terms)
                checks[f"no_{category.replace(' ', '_').replace('-', '_')}"] = not hits
                if not hits:
                    continue
                found_any = True
                score -= cfg.severity_penalties[severity] * len(hits)
                quoted = ", ".join(f'"{term}"' for term in hits)
                feedback.append(f"{severity.upper()}: {category} detected ({quoted}). {_ALTERNATIVES[category]}")
        checks["bias_free"] = not found_any
        if not found_any:
            strengths.append("Uses inclusive, bias-free language")

        for name, pattern in _SECTIONS.items():
            present = pattern.search(text) is not None
            checks[name] = present
            if not present:
                label = name.removeprefix("has_")
                feedback.append(f"Add a {label} section so candidates can self-assess.")
                score -= cfg.missing_section_penalty

        if word_count(text) < cfg.min_words:
            feedback.append(f"Job description is thin; aim for at least {cfg.min_words} words.")
            score -= 15

        signals = 0
        for pattern, bonus, label in _INCLUSION_SIGNALS:
            if pattern.search(text):
                signals += 1
                score += bonus
                strengths.append(label)
        if signals == 0 and not found_any:
            feedback.append("Add positive accessibility signals: remote options, accommodation statement or flexible benefits.")

        return finalize(score, checks=checks, feedback=feedback, strengths=strengths, category="job-description")
