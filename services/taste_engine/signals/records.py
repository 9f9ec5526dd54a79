"""
Validation of raw producer records into Signal / AntiSignal values.

Producers hand the engine plain dicts in two dialects:

  place enrichment:  {"dimension": "Design Language", "signal": "brutalist",
                      "confidence": 0.9, "review_corroborated": true,
                      "source_type": "review"}
  taste nodes:       {"domain": "Design", "signal": "brutalist",
                      "confidence": 0.9, "extractedAt": "2025-03-01T..."}

Both are accepted. Records whose domain falls outside the taxonomy, or that
fail validation, are dropped and logged; parsing never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from services.taste_engine.signals.taxonomy import resolve_domain
from services.taste_engine.signals.types import AntiSignal, Signal, clamp_confidence

logger = logging.getLogger(__name__)

# Accepted aliases -> canonical field name
_KEY_ALIASES: dict[str, str] = {
    "dimension": "domain",
    "signal": "tag",
    "extractedAt": "extracted_at",
    "review_corroborated": "corroborated",
    "sourceType": "source_type",
}


class SignalRecord(BaseModel):
    """Validates one raw signal record."""

    domain: str
    tag: str
    confidence: float
    extracted_at: datetime | None = None
    corroborated: bool = False
    source_type: str | None = None

    @model_validator(mode="before")
    @classmethod
    def apply_aliases(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        normalized: dict[str, Any] = {}
        for key, value in data.items():
            target = _KEY_ALIASES.get(key, key)
            # Canonical keys win over aliases
            if target in normalized and key != target:
                continue
            normalized[target] = value
        if normalized.get("corroborated") is None:
            normalized.pop("corroborated", None)
        return normalized

    @field_validator("domain")
    @classmethod
    def domain_must_be_known(cls, v: str) -> str:
        if resolve_domain(v) is None:
            raise ValueError(f"Unknown domain: {v!r}")
        return v

    @field_validator("tag")
    @classmethod
    def tag_must_be_present(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Empty tag")
        return v

    @field_validator("confidence")
    @classmethod
    def confidence_in_range(cls, v: float) -> float:
        return clamp_confidence(v)

    @field_validator("extracted_at")
    @classmethod
    def extracted_at_is_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


def _parse(records: Iterable[Mapping[str, Any]], factory: type[Signal]) -> list[Signal]:
    parsed: list[Signal] = []
    rejected = 0
    for raw in records or ():
        try:
            record = SignalRecord.model_validate(raw)
        except ValidationError as exc:
            rejected += 1
            logger.debug("parse_records: rejected record %r: %s", raw, exc.errors())
            continue
        parsed.append(
            factory(
                domain=record.domain,
                tag=record.tag,
                confidence=record.confidence,
                extracted_at=record.extracted_at,
                corroborated=record.corroborated,
                source_type=record.source_type,
            )
        )

    if rejected:
        logger.warning(
            "parse_records: dropped %d invalid %s record(s), kept %d",
            rejected,
            factory.__name__,
            len(parsed),
        )
    return parsed


def parse_signals(records: Iterable[Mapping[str, Any]]) -> list[Signal]:
    """Validate raw records into Signals, dropping invalid ones."""
    return _parse(records, Signal)


def parse_anti_signals(records: Iterable[Mapping[str, Any]]) -> list[AntiSignal]:
    """Validate raw records into AntiSignals, dropping invalid ones."""
    return _parse(records, AntiSignal)  # type: ignore[return-value]
