"\"\"\"Typer CLI entrypoint for the scoring pipeline.\"\"\""

from __future__ import annotations

import json
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import pendulum
import typer
import yaml
from dependency_injector import providers
from pydantic import ValidationError

from .container import ScoringContainer, create_container
from .core.validators import ValidatorRegistry, default_validators
from .embeddings import EmbeddingClient, HTTPEmbeddingClient
from .errors import ScoringError
from .llm import HTTPModelClient
from .logging import configure_logging
from .pipeline import OutputWriter
from .schemas import ReferenceAnswer, ValidationConfig
from .schemas.config import load_config
from .stores import JsonlAnalyticsSink, YamlGameRegistry

app = typer.Typer(help="Recruiting-skills submission scoring CLI.")


@app.command()
def score(
    request: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Scoring request JSON path."),
    games: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Games YAML path."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Settings YAML path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    pretty_logs: bool = typer.Option(False, help="Render logs for humans instead of JSON."),
    analytics_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Analytics event log (JSONL)."),
    model_endpoint: Optional[str] = typer.Option(None, help="Generative model API base URL."),
    model_api_key: Optional[str] = typer.Option(None, envvar="SKILLSCORING_MODEL_API_KEY", help="Generative model API key."),
    embedding_endpoint: Optional[str] = typer.Option(None, help="Embedding API endpoint."),
) -> None:
    """Score one submission against a games file."""
    configure_logging(log_level, json=not pretty_logs)
    settings = _load_settings(config)

    container = create_container(settings=settings)
    try:
        registry = YamlGameRegistry.from_path(games)
    except (ValueError, ValidationError) as exc:
        raise typer.BadParameter(f"Invalid games file: {exc}", param_name="games") from exc
    container.game_registry.override(providers.Object(registry))
    if analytics_log:
        container.analytics.override(providers.Object(JsonlAnalyticsSink(analytics_log)))
    if model_endpoint:
        container.model_client.override(providers.Object(HTTPModelClient(model_endpoint, model_api_key)))
    if embedding_endpoint:
        container.embedding_client.override(
            providers.Object(HTTPEmbeddingClient(embedding_endpoint, model_api_key))
        )

    seeded = seed_references(container, registry)

    try:
        payload = json.loads(request.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Invalid request JSON: {exc}", param_name="request") from exc

    pipeline = container.pipeline()
    try:
        response = pipeline.score_sync(payload)
    except ScoringError as exc:
        typer.echo(json.dumps(exc.to_dict(), ensure_ascii=False), err=True)
        raise typer.Exit(code=1) from exc

    OutputWriter().write(output, response)
    typer.echo(
        f"Scored attempt {response.attempt_id}: {response.final_score}/100 "
        f"(confidence {response.ensemble_breakdown.confidence}, {seeded} seed references). "
        f"Result saved to {output}."
    )


@app.command()
def validate(
    category: str = typer.Option("general", help="Skill category to validate as."),
    text: Optional[str] = typer.Option(None, help="Submission text."),
    file: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Submission text file."),
    keywords: list[str] = typer.Option([], "--keyword", help="Required keyword; repeatable."),
    location: Optional[str] = typer.Option(None, help="Required location for search strings."),
) -> None:
    """Run only the rule-based validator and print its result."""
    if text is None and file is None:
        raise typer.BadParameter("Provide --text or --file", param_name="text")
    body = text if text is not None else file.read_text(encoding="utf-8")
    registry = ValidatorRegistry(default_validators())
    result = registry.validate(category, body, ValidationConfig(keywords=keywords, location=location))
    typer.echo(json.dumps(asdict(result), ensure_ascii=False, indent=2))


def seed_references(container: ScoringContainer, registry: YamlGameRegistry) -> int:
    """Embed curated references from the games file into the corpus store."""
    client: EmbeddingClient = container.embedding_client()
    store = container.reference_store()
    created_at = pendulum.now("UTC").to_iso8601_string()
    count = 0
    for game in registry.games():
        for reference in game.references:
            embedding = client.embed(reference.text)
            if not embedding:
                continue
            store.append(
                ReferenceAnswer(
                    id=uuid.uuid4().hex,
                    game_id=game.game_id,
                    embedding=embedding,
                    score=reference.score,
                    source_type="seed",
                    verified=True,
                    created_at=created_at,
                    submission_text=reference.text,
                )
            )
            count += 1
    return count


def _load_settings(path: Path | None) -> dict[str, Any]:
    if not path:
        return {}
    with path.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise typer.BadParameter("Config file must be a YAML object", param_name="config")
    try:
        return load_config(loaded).to_settings()
    except ValidationError as exc:
        raise typer.BadParameter(f"Invalid config: {exc}", param_name="config") from exc


def main() -> None:
    app()


if __name__ == "__main__":
    main()
