"\"\"\"Error taxonomy for the scoring engine.\"\"\""

from __future__ import annotations

from typing import Any


class ScoringError(Exception):
    """Base class for scoring failures surfaced to callers."""

    status_code = 500
    code = "scoring_error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.context}


class SignalUnavailable(ScoringError):
    """A single scoring signal failed; the pipeline continues without it."""

    status_code = 503
    code = "signal_unavailable"

    def __init__(self, signal: str, message: str, **context: Any) -> None:
        super().__init__(message, signal=signal, **context)
        self.signal = signal


class SchemaParseError(SignalUnavailable):
    """Model output did not match the response contract."""

    code = "schema_parse_error"

    def __init__(self, errors: list[str], *, model: str | None = None) -> None:
        super().__init__("generative", "Model response failed schema validation", model=model)
        self.errors = errors

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Model response failed schema validation: {self.errors}"


class DuplicateSubmission(ScoringError):
    """An attempt already exists for this player and game."""

    status_code = 409
    code = "duplicate_submission"

    def __init__(self, player_id: str, game_id: str) -> None:
        super().__init__(
            "You have already submitted this game.",
            player_id=player_id,
            game_id=game_id,
        )
        self.player_id = player_id
        self.game_id = game_id


class DatastoreUnavailable(ScoringError):
    """A required store could not be reached."""

    status_code = 503
    code = "datastore_unavailable"


class InvalidInput(ScoringError):
    """The request failed validation."""

    status_code = 400
    code = "invalid_input"

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message, errors=errors or [])
        self.errors = errors or []


class GameNotFound(InvalidInput):
    status_code = 404
    code = "game_not_found"

    def __init__(self, game_id: str) -> None:
        super().__init__(f"Unknown game: {game_id!r}")
        self.game_id = game_id


__all__ = [
    "ScoringError",
    "SignalUnavailable",
    "SchemaParseError",
    "DuplicateSubmission",
    "DatastoreUnavailable",
    "InvalidInput",
    "GameNotFound",
]
