from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

try:  # Python <3.11 fallback
    import tomllib  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - fallback path
    import tomli as tomllib  # type: ignore

import yaml

from skill_snapshots.aggregation import (
    DAILY_MAX_DURATION,
    WEEKLY_MAX_DURATION,
    AggregationWindow,
)
from skill_snapshots.taxonomy import is_skill, validate_mappings


DEFAULT_OVERALL_ACTIVITY_TYPE = "OVERALL"
DEFAULT_WINDOW = AggregationWindow.DAILY.value

_SECTIONS = ("interval", "aggregation")


def _load_pyproject_config(project_root: Path) -> Dict[str, Any]:
    pyproject_path = project_root / "pyproject.toml"
    if not pyproject_path.exists():
        return {}

    with pyproject_path.open("rb") as f:
        data = tomllib.load(f)
    return data.get("tool", {}).get("skill_snapshots", {}) or {}


def _ensure_mapping(obj: Any, ctx: str) -> Dict[str, Any]:
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueError(f"{ctx} must be a mapping/object")
    return obj


def _load_override_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config override not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        return _ensure_mapping(json.loads(path.read_text(encoding="utf-8")), "JSON config")
    if suffix in {".yaml", ".yml"}:
        return _ensure_mapping(yaml.safe_load(path.read_text(encoding="utf-8")), "YAML config")
    if suffix == ".toml":
        with path.open("rb") as f:
            return _ensure_mapping(tomllib.load(f), "TOML config")

    raise ValueError(f"Unsupported config override format: {path}")


def _merge_section(base: Mapping[str, Any], override: Mapping[str, Any], key: str) -> Dict[str, Any]:
    merged = dict(_ensure_mapping(base.get(key), f"{key} section"))
    merged.update(_ensure_mapping(override.get(key), f"{key} section"))
    return merged


def _merge_top(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    merged.update(override)
    for key in _SECTIONS:
        merged.pop(key, None)
    return merged


def _opt_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def _flag(value: Any, default: bool) -> bool:
    return bool(default if value is None else value)


@dataclass(frozen=True)
class AppConfig:
    overall_activity_type: str = DEFAULT_OVERALL_ACTIVITY_TYPE
    validate_snapshots: bool = True
    require_complete_snapshots: bool = False
    max_interval_days: Optional[int] = None
    clamp_end_to_now: bool = False
    aggregation_window: str = DEFAULT_WINDOW
    daily_max_days: int = DAILY_MAX_DURATION.days
    weekly_max_days: int = WEEKLY_MAX_DURATION.days

    @property
    def window(self) -> AggregationWindow:
        try:
            return AggregationWindow(self.aggregation_window.upper())
        except ValueError:
            raise ValueError(f"Unknown aggregation window '{self.aggregation_window}'") from None

    @property
    def max_interval(self) -> Optional[timedelta]:
        if self.max_interval_days is None:
            return None
        return timedelta(days=self.max_interval_days)

    @property
    def daily_max(self) -> timedelta:
        return timedelta(days=self.daily_max_days)

    @property
    def weekly_max(self) -> timedelta:
        return timedelta(days=self.weekly_max_days)

    def validate(self, *, strict: bool = True) -> Dict[str, str]:
        issues: Dict[str, str] = {}

        try:
            _ = self.window
        except ValueError as e:
            issues["aggregation_window"] = str(e)

        if not is_skill(self.overall_activity_type):
            issues["overall_activity_type"] = f"not a skill activity type: {self.overall_activity_type!r}"

        if self.max_interval_days is not None and self.max_interval_days <= 0:
            issues["max_interval_days"] = "max_interval_days must be positive"

        for label, days in (("daily_max_days", self.daily_max_days), ("weekly_max_days", self.weekly_max_days)):
            if days <= 0:
                issues[label] = f"{label} must be positive"

        for idx, msg in enumerate(validate_mappings(strict=False)):
            issues[f"taxonomy_{idx}"] = msg

        for label in ("validate_snapshots", "require_complete_snapshots", "clamp_end_to_now"):
            if not isinstance(getattr(self, label), bool):
                issues[label] = f"{label} must be a bool"

        if strict and issues:
            details = "\n- ".join(f"{k}: {v}" for k, v in issues.items())
            raise ValueError("Config validation failed:\n- " + details)
        return issues

    @classmethod
    def _from_maps(
        cls,
        *,
        top: Mapping[str, Any],
        interval: Mapping[str, Any],
        aggregation: Mapping[str, Any],
    ) -> "AppConfig":
        return cls(
            overall_activity_type=str(top.get("overall_activity_type") or DEFAULT_OVERALL_ACTIVITY_TYPE),
            validate_snapshots=_flag(top.get("validate_snapshots"), True),
            require_complete_snapshots=_flag(top.get("require_complete_snapshots"), False),
            max_interval_days=_opt_int(interval.get("max_interval_days")),
            clamp_end_to_now=_flag(interval.get("clamp_end_to_now"), False),
            aggregation_window=str(aggregation.get("window", DEFAULT_WINDOW)).upper(),
            daily_max_days=int(aggregation.get("daily_max_days", DAILY_MAX_DURATION.days)),
            weekly_max_days=int(aggregation.get("weekly_max_days", WEEKLY_MAX_DURATION.days)),
        )


def load_app_config(*, project_root: Optional[Path] = None, override_path: Optional[Path] = None) -> AppConfig:
    root = Path(project_root) if project_root else Path.cwd()

    base = _load_pyproject_config(root)
    override = _load_override_file(override_path) if override_path else {}

    top = _merge_top(base, override)
    interval = _merge_section(base, override, "interval")
    aggregation = _merge_section(base, override, "aggregation")

    return AppConfig._from_maps(top=top, interval=interval, aggregation=aggregation)
