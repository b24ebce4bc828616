"""Aggregation profile loader backed by JSON files under ``config/profiles``."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonschema.validators import validator_for

from burdenunits.config import DEFAULT_MISSING_TOKEN, ColumnMapping, FilterSettings

CONFIG_ROOT = Path(__file__).resolve().parents[2] / "config"


@dataclass(frozen=True)
class AggregationProfile:
    """Serializable profile naming input columns and filter settings."""

    name: str
    filters: FilterSettings
    columns: ColumnMapping = field(default_factory=ColumnMapping)
    missing_token: str = DEFAULT_MISSING_TOKEN
    description: str = ""


class AggregationProfileLoader:
    """Load profile JSON from ``config/profiles`` or a custom path.

    Every payload is checked against ``aggregation_profile.schema.json`` before
    parsing, so a malformed profile fails with a ``jsonschema.ValidationError``
    that points at the offending field.
    """

    def __init__(
        self,
        profiles_dir: str | Path | None = None,
        schema_path: str | Path | None = None,
    ) -> None:
        if profiles_dir is None:
            profiles_dir = CONFIG_ROOT / "profiles"
        if schema_path is None:
            schema_path = CONFIG_ROOT / "schemas" / "aggregation_profile.schema.json"
        self.profiles_dir = Path(profiles_dir)
        self.schema_path = Path(schema_path)
        self._validator: Any = None

    def list_profiles(self) -> list[str]:
        """Return available profile names from the configured profile directory."""

        return sorted(path.stem for path in self.profiles_dir.glob("*.json"))

    def load(self, name_or_path: str | Path) -> AggregationProfile:
        """Load a profile by name (for example, ``cadd_intronic``) or explicit path."""

        path = self._resolve_path(name_or_path)
        payload = json.loads(path.read_text())
        return self.parse(payload)

    def parse(self, payload: dict[str, Any]) -> AggregationProfile:
        self._compiled_validator().validate(payload)

        filters = payload["filters"]
        return AggregationProfile(
            name=str(payload["name"]),
            description=str(payload.get("description", "")),
            missing_token=str(payload.get("missing_token", DEFAULT_MISSING_TOKEN)),
            columns=ColumnMapping(**payload.get("columns", {})),
            filters=FilterSettings(
                score_threshold=float(filters["score_threshold"]),
                consequence_pattern=str(filters["consequence_pattern"]),
                regex=bool(filters.get("regex", False)),
                case_sensitive=bool(filters.get("case_sensitive", True)),
            ),
        )

    def _resolve_path(self, name_or_path: str | Path) -> Path:
        requested = Path(name_or_path)

        if requested.exists():
            return requested

        candidate = self.profiles_dir / f"{requested}.json"
        if candidate.exists():
            return candidate

        raise FileNotFoundError(
            f"Profile not found: {name_or_path}. Available: {', '.join(self.list_profiles())}"
        )

    def _compiled_validator(self) -> Any:
        if self._validator is None:
            schema = json.loads(self.schema_path.read_text())
            validator_cls = validator_for(schema)
            validator_cls.check_schema(schema)
            self._validator = validator_cls(schema)
        return self._validator
