"""Embedding clients: remote HTTP service and a deterministic local fallback."""

from __future__ import annotations

import hashlib
import json
import math
import re
from collections import Counter
from typing import Any, Protocol, runtime_checkable
from urllib import error, request

import structlog

_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9]+|[À-ɏ]+|[ぁ-んァ-ン一-龥]+")


@runtime_checkable
class EmbeddingClient(Protocol):
    """Embedding contract; an empty list means the signal is absent."""

    def embed(self, text: str) -> list[float]:
        """Return the embedding vector for ``text``."""


class HTTPEmbeddingClient:
    """HTTP client for a ``embedContent``-style embedding API."""

    def __init__(
        self,
        endpoint: str | None,
        api_key: str | None = None,
        *,
        model: str = "text-embedding-004",
        timeout: float = 8.0,
    ):
        self._endpoint = endpoint
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._logger = structlog.get_logger(__name__)

    def embed(self, text: str) -> list[float]:
        if not self._endpoint or not text.strip():
            return []
        payload = {"model": self._model, "content": {"parts": [{"text": text}]}}
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["x-goog-api-key"] = self._api_key

        req = request.Request(self._endpoint, data=data, headers=headers, method="POST")
        try:
            with request.urlopen(req, timeout=self._timeout) as resp:
                body = resp.read().decode("utf-8")
        except (error.URLError, TimeoutError) as exc:
            self._logger.warning("embedding.request_failed", model=self._model, error=str(exc))
            return []
        try:
            return _extract_values(json.loads(body) if body else {})
        except (ValueError, TypeError) as exc:
            self._logger.warning("embedding.invalid_response", model=self._model, error=str(exc))
            return []


def _extract_values(payload: dict[str, Any]) -> list[float]:
    embedding = payload.get("embedding")
    if isinstance(embedding, dict):
        embedding = embedding.get("values")
    if embedding is None and payload.get("embeddings"):
        embedding = payload["embeddings"][0].get("values")
    if not isinstance(embedding, list):
        raise ValueError("response does not contain an embedding vector")
    return [float(value) for value in embedding]


class HashedTermEmbeddingClient:
    """Feature-hashed term-frequency vectors; stable across processes."""

    def __init__(self, *, dimensions: int = 256, synonyms: dict[str, list[str]] | None = None):
        if dimensions <= 0:
            raise ValueError("dimensions must be positive")
        self._dimensions = dimensions
        self._synonyms = synonyms or {}

    def embed(self, text: str) -> list[float]:
        tokens = self._tokenize(self._augment_text(text))
        if not tokens:
            return []
        features = Counter(tokens)
        features.update(f"{a}_{b}" for a, b in zip(tokens, tokens[1:]))

        vector = [0.0] * self._dimensions
        for feature, count in features.items():
            digest = hashlib.blake2b(feature.encode("utf-8"), digest_size=8).digest()
            bucket = int.from_bytes(digest[:4], "big") % self._dimensions
            sign = 1.0 if digest[4] & 1 else -1.0
            vector[bucket] += sign * (1.0 + math.log(count))

        norm = math.sqrt(sum(value * value for value in vector))
        if norm == 0:
            return []
        return [value / norm for value in vector]

    def _tokenize(self, text: str) -> list[str]:
        tokens = _TOKEN_PATTERN.findall(text.lower())
        normalized: list[str] = []
        for token in tokens:
            if token in {"k8s", "kube"}:
                normalized.append("kubernetes")
            elif token in {"js", "ecmascript"}:
                normalized.append("javascript")
            else:
                normalized.append(token)
        return normalized

    def _augment_text(self, text: str) -> str:
        extras: list[str] = []
        for token in _TOKEN_PATTERN.findall(text.lower()):
            extras.extend(self._synonyms.get(token, []))
        if extras:
            return text + " " + " ".join(sorted(set(extras)))
        return text
