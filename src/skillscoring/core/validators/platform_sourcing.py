"\"\"\"Platform-specific sourcing plan validators (LinkedIn, GitHub, multi-platform).\"\"\""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from ...schemas import ValidationConfig
from .base import ValidationResult, blend, finalize
from .general import validate_data_driven


@dataclass(frozen=True)
class SignalGroup:
    """A family of patterns scored as one check."""

    name: str
    label: str
    patterns: tuple[re.Pattern[str], ...]
    strong_at: int
    weak_at: int
    bonus: int
    penalty: int
    hint: str


def _group(name: str, label: str, patterns: Sequence[str], *, strong_at: int, weak_at: int, bonus: int, penalty: int, hint: str) -> SignalGroup:
    return SignalGroup(
        name=name,
        label=label,
        patterns=tuple(re.compile(p, re.IGNORECASE) for p in patterns),
        strong_at=strong_at,
        weak_at=weak_at,
        bonus=bonus,
        penalty=penalty,
        hint=hint,
    )


LINKEDIN_GROUPS: tuple[SignalGroup, ...] = (
    _group(
        "uses_search_syntax",
        "LinkedIn search syntax",
        [r"\b(AND|OR|NOT)\b", r"\"[^\"]+\"", r"\([^)]+\)", r"\bsite:\s*linkedin\.com", r"\b(intitle|inurl):", r"\b(title|headline):"],
        strong_at=4, weak_at=2, bonus=12, penalty=25,
        hint='Use Boolean logic, e.g. "software engineer" AND (Python OR Java) NOT junior.',
    ),
    _group(
        "uses_filters",
        "LinkedIn filters",
        [r"\b(location|region|city|country)\b", r"\bindustr(y|ies)\b", r"\b(years|seniority|level)\b",
         r"\b(current company|past company|employer)\b", r"\b(school|university|degree)\b", r"\bopen to work\b"],
        strong_at=4, weak_at=2, bonus=8, penalty=15,
        hint="Narrow results with location, experience level, industry and Open to Work filters.",
    ),
    _group(
        "has_profile_criteria",
        "profile evaluation",
        [r"\b(headline|job title|current role)\b", r"\b(work history|tenure)\b", r"\b(skills|endorsements?)\b",
         r"\brecommendations?\b", r"\b(activity|posts?|articles?)\b", r"\bcertifications?\b"],
        strong_at=4, weak_at=2, bonus=10, penalty=18,
        hint="Explain how you judge profile quality: headline, tenure, skills, recommendations, activity.",
    ),
    _group(
        "has_outreach_strategy",
        "outreach strategy",
        [r"\bin-?mail\b", r"\bconnection request\b", r"\b(personali[sz]e|tailor)", r"\bfollow.?up\b",
         r"\b(response|reply|acceptance) rate\b", r"\b(subject line|hook|opener)\b"],
        strong_at=4, weak_at=2, bonus=10, penalty=15,
        hint="Describe engagement: InMail vs connection request, personalization and follow-up cadence.",
    ),
)

GITHUB_GROUPS: tuple[SignalGroup, ...] = (
    _group(
        "uses_search_syntax",
        "GitHub search syntax",
        [r"\blanguage:\s*\w+", r"\bstars:\s*[><=]", r"\bforks?:\s*[><=]", r"\bpushed:\s*[><=]?\s*[\d-]+",
         r"\btopics?:\s*\w+", r"\barchived:\s*(true|false)"],
        strong_at=3, weak_at=1, bonus=10, penalty=25,
        hint="Use GitHub operators such as language:Python stars:>100 pushed:>2024-01-01.",
    ),
    _group(
        "has_repository_criteria",
        "repository evaluation",
        [r"\b(stars?|popularity)\b", r"\bforks?\b", r"\b(commits?|recent activity)\b", r"\b(issues?|pull requests?)\b",
         r"\b(readme|documentation)\b", r"\b(tests?|ci)\b"],
        strong_at=4, weak_at=2, bonus=8, penalty=15,
        hint="Explain which repositories matter: activity, stars, issues, documentation, tests.",
    ),
    _group(
        "identifies_contributors",
        "contributor identification",
        [r"\bcontributors?\b", r"\bmaintainers?\b", r"\bcode reviews?\b", r"\bmerged\b", r"\bcommit history\b"],
        strong_at=3, weak_at=1, bonus=8, penalty=18,
        hint="Show how you find the people behind the code: contributors, maintainers, reviewers.",
    ),
    _group(
        "has_outreach_strategy",
        "outreach strategy",
        [r"\b(email|reach out|message)\b", r"\b(personali[sz]e|reference their)", r"\bfollow.?up\b", r"\bpassive\b"],
        strong_at=3, weak_at=1, bonus=6, penalty=12,
        hint="Plan outreach that references the contributor's actual work.",
    ),
)

_GITHUB_CONTEXT = re.compile(r"\b(github|repository|repo|open.?source|commit|pull request)\b", re.IGNORECASE)


@dataclass
class PlatformSourcingConfig:
    platform_weight: float = 0.6


class PlatformSourcingValidator:
    """Scores sourcing plans by how many platform-specific signal families they cover."""

    categories = ("multiplatform", "linkedin")

    def __init__(self, *, config: PlatformSourcingConfig | None = None) -> None:
        self._config = config or PlatformSourcingConfig()

    def validate(self, text: str, config: ValidationConfig) -> ValidationResult:
        groups, platform = self._select_groups(text, config)
        platform_result = self._score_groups(text, groups, platform)
        weight = self._config.platform_weight
        return blend(
            [(platform_result, weight), (validate_data_driven(text), 1.0 - weight)],
            category=platform,
        )

    @staticmethod
    def _select_groups(text: str, config: ValidationConfig) -> tuple[tuple[SignalGroup, ...], str]:
        context = " ".join([text, *config.keywords])
        if re.search(r"\blinkedin\b", context, re.IGNORECASE):
            return LINKEDIN_GROUPS, "linkedin"
        if _GITHUB_CONTEXT.search(context):
            return GITHUB_GROUPS, "github"
        return LINKEDIN_GROUPS, "multiplatform"

    @staticmethod
    def _score_groups(text: str, groups: Sequence[SignalGroup], platform: str) -> ValidationResult:
        feedback: list[str] = []
        strengths: list[str] = []
        checks: dict[str, bool] = {}
        score = 100
        for group in groups:
            hits = sum(1 for pattern in group.patterns if pattern.search(text))
            checks[group.name] = hits >= group.weak_at
            if hits >= group.strong_at:
                strengths.append(f"Strong {group.label}")
                score += group.bonus
            elif hits >= group.weak_at:
                feedback.append(f"Good start on {group.label}. {group.hint}")
            else:
                feedback.append(f"Missing {group.label}. {group.hint}")
                score -= group.penalty
        return finalize(score, checks=checks, feedback=feedback, strengths=strengths, category=platform)
