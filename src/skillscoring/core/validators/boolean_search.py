"\"\"\"Boolean and X-ray search string validator.\"\"\""

from __future__ import annotations

import re
from dataclasses import dataclass

from ...schemas import ValidationConfig
from .base import ValidationResult, finalize, phrase_pattern

DEFAULT_KEYWORD_SYNONYMS: dict[str, list[str]] = {
    "kubernetes": ["k8s", "kube", "container orchestration"],
    "golang": ["go", "go language", "go-lang"],
    "javascript": ["js", "ecmascript", "es6"],
    "typescript": ["ts"],
    "python": ["py"],
    "react": ["reactjs", "react.js"],
    "vue": ["vuejs", "vue.js"],
    "angular": ["angularjs", "angular.js"],
    "node": ["nodejs", "node.js"],
    "database": ["db", "databases", "datastore"],
    "engineer": [
        "developer", "programmer", "architect", "swe", "software engineer", "dev",
        "ingenieur", "entwickler", "softwareentwickler",
        "ingénieur", "développeur", "ingeniero", "desarrollador",
        "ontwikkelaar", "engenheiro", "desenvolvedor",
    ],
    "developer": [
        "dev", "engineer", "programmer", "coder", "software developer",
        "entwickler", "développeur", "desarrollador", "ontwikkelaar", "desenvolvedor",
    ],
    "senior": ["lead", "principal", "staff", "sr", "chief", "leitender", "sénior", "sênior"],
    "backend": ["back-end", "server-side", "api", "serverseitig", "côté serveur"],
    "frontend": ["front-end", "client-side", "ui", "user interface"],
    "fullstack": ["full-stack", "full stack"],
    "remote": [
        "distributed", "work from home", "wfh", "telecommute",
        "home office", "homeoffice", "télétravail", "remoto", "thuiswerken",
    ],
    "vienna": ["wien", "vienne", "1010", "1020", "1030"],
    "berlin": ["10115", "10117", "berlín"],
    "munich": ["münchen", "muenchen", "80331"],
    "cologne": ["köln", "koeln", "colonia"],
    "paris": ["75001", "parís", "parijs"],
    "madrid": ["28001", "madri"],
    "amsterdam": ["1011", "1012"],
    "brussels": ["bruxelles", "brussel"],
    "zurich": ["zürich", "zuerich"],
    "geneva": ["genève", "genf"],
    "prague": ["praha", "praga"],
    "lisbon": ["lisboa", "lissabon"],
}

_OPERATOR = re.compile(r"\b(AND|OR|NOT)\b", re.IGNORECASE)
_PARENTHESES = re.compile(r"\([^)]+\)")
_QUOTED_PHRASE = re.compile(r"\"[^\"]{10,80}\"")
_PROXIMITY_PATTERNS = (
    re.compile(r"\b(NEAR|AROUND)(/\d+)?\b", re.IGNORECASE),
    _QUOTED_PHRASE,
    re.compile(r"\bw/\d+\b", re.IGNORECASE),
    re.compile(r"\*+"),
    re.compile(r"NEAR:\d+", re.IGNORECASE),
)
_STRICT_PROXIMITY = re.compile(r"\b(NEAR|AROUND)(/\d+)?\b", re.IGNORECASE)
_AMBIGUOUS = re.compile(r"\bOR\b.*\bAND\b|\bAND\b.*\bOR\b", re.IGNORECASE | re.DOTALL)
_LOCATION_PATTERNS = (
    re.compile(r"\bsite:[a-z]{2}\.linkedin\.com\b", re.IGNORECASE),
    re.compile(r"\bwithin:\d+mi:postal:\d+\b", re.IGNORECASE),
    re.compile(r"\b(greater|metro|metropolitan)\s+\w+\s+area\b", re.IGNORECASE),
)


@dataclass
class BooleanSearchConfig:
    """Deductions applied by the boolean search validator."""

    max_operators: int = 12
    ambiguous_precedence_penalty: int = 15
    missing_operators_penalty: int = 20
    missing_proximity_penalty: int = 5
    overly_complex_penalty: int = 10
    location_required_penalty: int = 10
    location_optional_penalty: int = 5
    strict_keyword_penalty: int = 10
    flexible_keyword_penalty: int = 5


def build_synonym_map(custom: dict[str, list[str]] | None = None) -> dict[str, list[str]]:
    merged = {key: list(values) for key, values in DEFAULT_KEYWORD_SYNONYMS.items()}
    for key, values in (custom or {}).items():
        normalized = key.lower()
        merged[normalized] = merged.get(normalized, []) + [value.lower() for value in values]
    return merged


class BooleanSearchValidator:
    """Score search strings on operator use, grouping, targeting and coverage."""

    categories = ("boolean", "xray")

    def __init__(self, *, config: BooleanSearchConfig | None = None) -> None:
        self._config = config or BooleanSearchConfig()

    def validate(self, text: str, config: ValidationConfig) -> ValidationResult:
        cfg = self._config
        feedback: list[str] = []
        strengths: list[str] = []
        score = 100

        operator_count = len(_OPERATOR.findall(text))
        has_and = re.search(r"\bAND\b", text) is not None
        has_or = re.search(r"\bOR\b", text) is not None
        if config.recognize_phrases_as_proximity:
            has_proximity = any(pattern.search(text) for pattern in _PROXIMITY_PATTERNS)
        else:
            has_proximity = _STRICT_PROXIMITY.search(text) is not None
        checks = {
            "has_parentheses": _PARENTHESES.search(text) is not None,
            "has_and": has_and,
            "has_or": has_or,
            "has_not": re.search(r"\bNOT\b", text) is not None or "-" in text,
            "has_proximity": has_proximity,
            "is_overly_complex": operator_count > cfg.max_operators,
        }

        if _AMBIGUOUS.search(text) and not checks["has_parentheses"]:
            feedback.append(
                "When mixing AND/OR operators, use parentheses to clarify precedence, "
                "e.g. (React OR Vue) AND (senior OR lead)."
            )
            score -= cfg.ambiguous_precedence_penalty
        elif checks["has_parentheses"]:
            strengths.append("Uses parentheses for clear grouping")

        if has_and and has_or:
            strengths.append("Combines AND/OR operators effectively")
        elif not has_and and not has_or:
            if config.allow_implicit_and and len(text.split()) >= 3:
                strengths.append("Uses implicit AND (multiple search terms)")
            else:
                feedback.append(
                    "Search string lacks boolean operators (AND, OR). Add operators to control how terms combine."
                )
                score -= cfg.missing_operators_penalty

        if has_proximity:
            if _QUOTED_PHRASE.search(text):
                strengths.append("Uses phrase matching to keep terms close together")
            else:
                strengths.append("Uses proximity operators or wildcards to keep terms close")
        elif text:
            feedback.append(
                "Consider adding proximity operators (NEAR/AROUND) or exact phrases to keep critical terms together."
            )
            score -= cfg.missing_proximity_penalty

        if checks["is_overly_complex"]:
            feedback.append(
                f"Search might be overly complex with {operator_count} operators. "
                "Simplify groups to avoid platform limits and noise."
            )
            score -= cfg.overly_complex_penalty

        synonyms = build_synonym_map(config.synonym_map)

        if config.location:
            has_location = self._has_location(text, config.location, synonyms)
            checks["has_location"] = has_location
            if has_location:
                strengths.append("Includes location targeting strategy")
            elif config.location_required:
                feedback.append(f"Missing required location targeting ({config.location}).")
                score -= cfg.location_required_penalty
            else:
                feedback.append(
                    f"Consider adding location targeting (e.g. {config.location}, postal codes or site: filters)."
                )
                score -= cfg.location_optional_penalty

        if config.keywords:
            missing = self._missing_keywords(text, config.keywords, synonyms, config.strict_keyword_match)
            checks["has_keywords"] = not missing
            if missing and config.strict_keyword_match:
                feedback.append(f"Missing required keywords: {', '.join(missing)}")
                score -= cfg.strict_keyword_penalty * len(missing)
            elif missing:
                feedback.append(f"Consider adding these concepts (or their synonyms): {', '.join(missing)}")
                score -= cfg.flexible_keyword_penalty * len(missing)
            else:
                strengths.append("Covers all required concepts")

        return finalize(
            score,
            checks=checks,
            feedback=feedback,
            strengths=strengths,
            category="boolean",
        )

    @staticmethod
    def _has_location(text: str, location: str, synonyms: dict[str, list[str]]) -> bool:
        if any(pattern.search(text) for pattern in _LOCATION_PATTERNS):
            return True
        candidates = [location, *synonyms.get(location.lower(), [])]
        return any(phrase_pattern(candidate).search(text) for candidate in candidates)

    @staticmethod
    def _missing_keywords(
        text: str,
        keywords: list[str],
        synonyms: dict[str, list[str]],
        strict: bool,
    ) -> list[str]:
        missing: list[str] = []
        for keyword in keywords:
            variants = [keyword] if strict else [keyword, *synonyms.get(keyword.lower(), [])]
            if not any(phrase_pattern(variant).search(text) for variant in variants):
                missing.append(keyword)
        return missing
