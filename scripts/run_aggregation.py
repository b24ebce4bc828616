#!/usr/bin/env python3
"""Build burden test aggregate units from a JSON run config."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from burdenunits import (  # noqa: E402
    AggregationProfileLoader,
    BurdenUnitPipeline,
    build_default_provider_registry,
)
from burdenunits.publishers import (  # noqa: E402
    AggregateTablePublisher,
    GroupSummaryPublisher,
)
from burdenunits.storage import DuckDBParquetStorage  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build aggregate units from JSON config")
    parser.add_argument("--config", required=True, help="Path to run JSON config")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser.parse_args(argv)


def load_json(path: str | Path) -> dict[str, Any]:
    return json.loads(Path(path).read_text())


def build_publishers(config: dict[str, Any]) -> list[Any]:
    publishers: list[Any] = []
    for item in config.get("publishers", []):
        name = str(item["name"]).strip().lower()
        params = dict(item.get("params", {}))

        if name == "unit_table":
            publishers.append(AggregateTablePublisher(**params))
        elif name == "group_summary":
            publishers.append(GroupSummaryPublisher(**params))
        else:
            raise ValueError(f"Unknown publisher: {name}")

    return publishers


def build_storage(config: dict[str, Any]) -> Any:
    storage_config = config.get("storage")
    if not storage_config:
        return None

    storage_type = str(storage_config.get("type", "")).strip().lower()
    params = dict(storage_config.get("params", {}))

    if storage_type == "duckdb_parquet":
        return DuckDBParquetStorage(**params)

    raise ValueError(f"Unknown storage type: {storage_type}")


def build_provider(config: dict[str, Any], profile: Any) -> Any:
    provider_raw = config.get("provider")
    if not provider_raw:
        raise ValueError("No provider configured. Set provider.name and provider.params.")

    registry = build_default_provider_registry(config.get("plugins", []))
    params = dict(provider_raw.get("params", {}))
    return registry.create(provider_raw["name"], profile, **params)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logger = logging.getLogger("burdenunits.runner")
    started = time.perf_counter()

    config = load_json(args.config)

    profile_loader = AggregationProfileLoader(profiles_dir=config.get("profiles_dir"))
    if "profile_path" in config:
        profile = profile_loader.load(config["profile_path"])
    else:
        profile = profile_loader.load(config.get("profile", "cadd_intronic"))
    logger.info("Profile: %s", profile.name)

    report = BurdenUnitPipeline(
        provider=build_provider(config, profile),
        publishers=build_publishers(config),
        storage=build_storage(config),
    ).run()

    payload = {
        "profile": profile.name,
        "provider": report.provider,
        "input_rows": report.input_rows,
        "retained_rows": report.retained_rows,
        "dropped_missing_group": report.dropped_missing_group,
        "dropped_by_score": report.dropped_by_score,
        "dropped_by_consequence": report.dropped_by_consequence,
        "unique_group_count": report.unique_group_count,
        "elapsed_seconds": round(time.perf_counter() - started, 2),
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
