"\"\"\"Outreach message validator.\"\"\""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ...schemas import ValidationConfig
from .base import ValidationResult, find_phrases, finalize, word_count

_SHALLOW = (
    re.compile(r"\b(hi|hello|hey)\s+\[(name|candidate)\]", re.IGNORECASE),
    re.compile(r"\b(hi|hello|hey)\s+\{name\}", re.IGNORECASE),
    re.compile(r"\b(hi|hello|hey)\s+there\b", re.IGNORECASE),
    re.compile(r"\b(hi|hello|hey)\s+(everyone|team|folks)\b", re.IGNORECASE),
)
_MEDIUM = (
    re.compile(r"\b(hi|hello|hey)\s+[A-Z][a-z]+\b"),
    re.compile(r"\byour (company|team|work at|role at)\b", re.IGNORECASE),
    re.compile(r"\b(working at|employed at|position at)\s+[A-Z]", re.IGNORECASE),
    re.compile(r"\byour (profile|background|experience)\b", re.IGNORECASE),
)
_DEEP = (
    re.compile(r"\b(presentation|talk|article|post|contribution|paper|blog)\b", re.IGNORECASE),
    re.compile(r"\b(noticed|saw|read|watched|came across|impressed by)\s+your\b", re.IGNORECASE),
    re.compile(r"\b(conference|summit|meetup|webinar)\b", re.IGNORECASE),
    re.compile(r"\b(open[- ]source|github|repository)\b", re.IGNORECASE),
)
_CALL_TO_ACTION = re.compile(
    r"(call|chat|connect|interested|open to|schedule|time to talk|let (?:me|us) know|reply|coffee|conversation|discuss|explore)",
    re.IGNORECASE,
)
_SUBJECT = re.compile(r"Subject:\s*(.*)", re.IGNORECASE)
_WEAK_SUBJECT = re.compile(r"^(hi|hello|follow up|checking in)$", re.IGNORECASE)
_VALUE_PROP = re.compile(
    r"\b(opportunity|role|position|challenge|team|company|product|mission|impact|work on|build|scale)\b",
    re.IGNORECASE,
)
_TIME_RESPECT = re.compile(r"\b(15[- ]min|quick|brief|short|no pressure|no obligation)\b", re.IGNORECASE)


@dataclass
class OutreachConfig:
    """Cliché lists and deductions for outreach scoring."""

    severe_cliches: list[str] = field(
        default_factory=lambda: [
            "just checking in",
            "circling back",
            "touching base",
            "hope this email finds you well",
            "hope you are well",
            "i hope this finds you well",
            "per my last email",
            "just wanted to reach out",
            "i wanted to reach out to you",
        ]
    )
    recruiting_cliches: list[str] = field(
        default_factory=lambda: [
            "great opportunity for you",
            "perfect fit for you",
            "came across your profile",
            "your profile caught my attention",
            "i found your profile",
            "your background is impressive",
            "would love to connect",
            "are you open to new opportunities",
        ]
    )
    moderate_cliches: list[str] = field(
        default_factory=lambda: [
            "following up",
            "quick question",
            "picking your brain",
            "looping back",
            "gentle reminder",
            "friendly reminder",
        ]
    )
    mild_cliches: list[str] = field(
        default_factory=lambda: [
            "at your earliest convenience",
            "when you get a chance",
            "whenever you have time",
            "no rush",
        ]
    )
    generic_templates: list[str] = field(
        default_factory=lambda: [
            "to whom it may concern",
            "dear sir or madam",
            "i am reaching out to you because",
            "i wanted to connect with you",
            "amazing opportunity",
        ]
    )
    cliche_penalties: dict[str, int] = field(
        default_factory=lambda: {"severe": 8, "recruiting": 7, "moderate": 5, "mild": 3}
    )
    min_words: int = 10


class OutreachValidator:
    """Score recruiting outreach on personalization, clarity and tone."""

    categories = ("outreach",)

    def __init__(self, *, config: OutreachConfig | None = None) -> None:
        self._config = config or OutreachConfig()

    def validate(self, text: str, config: ValidationConfig) -> ValidationResult:
        cfg = self._config
        feedback: list[str] = []
        strengths: list[str] = []
        score = 100
        words = word_count(text)
        max_words = config.max_words

        level = self._personalization_level(text)
        if level == "deep":
            strengths.append("Deep personalization (references specific achievements or work)")
        elif level == "medium":
            strengths.append("Includes name or company personalization")
        elif level == "shallow":
            feedback.append("Personalization is template-based. Reference specific talks, projects or articles.")
            score -= 10
        else:
            feedback.append("Add personalization: the candidate's name plus a specific achievement or piece of work.")
            score -= 15

        subject_match = _SUBJECT.search(text)
        checks = {
            "length_ok": cfg.min_words < words <= max_words,
            "has_subject_line": subject_match is not None,
            "has_call_to_action": _CALL_TO_ACTION.search(text) is not None,
            "has_personalization": level != "none",
            "deep_personalization": level == "deep",
        }

        if words < cfg.min_words:
            feedback.append("Message is too short to give the candidate a reason to respond.")
            score -= 40
        elif words > max_words:
            feedback.append(f"Message is too long ({words} words). Aim for under {max_words}.")
            score -= 10
        else:
            strengths.append("Clear, concise length for outreach")

        found = {
            "severe": find_phrases(text, cfg.severe_cliches),
            "recruiting": find_phrases(text, cfg.recruiting_cliches),
            "moderate": find_phrases(text, cfg.moderate_cliches),
            "mild": find_phrases(text, cfg.mild_cliches),
        }
        checks["has_cliches"] = any(found.values())
        if checks["has_cliches"]:
            parts: list[str] = []
            for tier, phrases in found.items():
                if not phrases:
                    continue
                score -= cfg.cliche_penalties[tier] * len(phrases)
                quoted = ", ".join(f'"{phrase}"' for phrase in phrases)
                parts.append(f"{tier} ({len(phrases)}): {quoted}")
            feedback.append("Avoid overused phrases: " + "; ".join(parts))
        else:
            strengths.append("Avoids common outreach cliches")

        generic = find_phrases(text, cfg.generic_templates)
        checks["is_generic"] = bool(generic)
        if generic:
            feedback.append("Message uses generic templates: " + ", ".join(f'"{phrase}"' for phrase in generic))
            score -= 10

        if checks["has_call_to_action"]:
            strengths.append("Includes a clear call-to-action")
        else:
            feedback.append('Add a clear, low-friction call-to-action (e.g. "Quick 15-min call this week?").')
            score -= 12

        if subject_match is None:
            feedback.append("Add a subject line to catch attention and set context.")
            score -= 8
        else:
            subject = subject_match.group(1).strip()
            if len(subject) < 8 or _WEAK_SUBJECT.match(subject):
                feedback.append("Subject line is weak or too generic. Make it specific and benefit-driven.")
                score -= 8
            else:
                strengths.append("Uses a specific, engaging subject line")

        if _VALUE_PROP.search(text):
            strengths.append("Mentions the opportunity or value proposition")
        else:
            feedback.append("Mention what makes the opportunity compelling (team, product, challenges, impact).")
            score -= 5

        if _TIME_RESPECT.search(text):
            strengths.append("Respects the candidate's time with a brief, specific ask")

        return finalize(
            score,
            checks=checks,
            feedback=feedback,
            strengths=strengths,
            category="outreach",
        )

    @staticmethod
    def _personalization_level(text: str) -> str:
        if any(pattern.search(text) for pattern in _DEEP):
            return "deep"
        if any(pattern.search(text) for pattern in _MEDIUM):
            return "medium"
        if any(pattern.search(text) for pattern in _SHALLOW):
            return "shallow"
        return "none"
