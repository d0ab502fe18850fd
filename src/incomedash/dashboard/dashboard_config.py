"""
Dashboard config persistence (platformdirs + JSON).

Persisted items (schema v1):
- csv_path: dataset file to load on startup
- bar_padding / row_padding / box_padding: band-scale padding for column,
  horizontal-bar and box charts
- age_domain / hours_domain: fixed x-axis ranges for the box plots, or null
  to fit the axis to the data
- rate_domain_mode: "max" (0..largest rate) or "unit" (0..1)

Behavior:
- If config file missing or unreadable -> defaults are used
- If schema_version mismatches -> reset to defaults
- Unknown keys in loaded JSON are ignored with warnings
- Out-of-range values fall back to their defaults with a warning
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from incomedash.utils.logging import get_logger

logger = get_logger(__name__)

# Increment when you make a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1

DEFAULT_CSV_PATH = "adult.csv"
DEFAULT_AGE_DOMAIN = (15.0, 95.0)
DEFAULT_HOURS_DOMAIN = (0.0, 100.0)
RATE_DOMAIN_MODES = ("max", "unit")


def _parse_padding(d: Dict[str, Any], key: str, default: float) -> float:
    if key not in d:
        return default
    try:
        v = float(d[key])
    except (TypeError, ValueError):
        logger.warning(f"{key}={d[key]!r} is not a number, using {default}")
        return default
    if not 0.0 <= v < 1.0:
        logger.warning(f"{key}={v} is outside [0, 1), using {default}")
        return default
    return v


def _parse_domain(
    d: Dict[str, Any], key: str, default: Optional[tuple[float, float]]
) -> Optional[tuple[float, float]]:
    if key not in d:
        return default
    raw = d[key]
    if raw is None:
        return None
    try:
        lo, hi = (float(raw[0]), float(raw[1]))
    except (TypeError, ValueError, IndexError, KeyError):
        logger.warning(f"{key}={raw!r} is not a [min, max] pair, using {default}")
        return default
    if lo > hi:
        logger.warning(f"{key}={raw!r} has min > max, using {default}")
        return default
    return (lo, hi)


@dataclass
class DashboardConfigData:
    """
    JSON-serializable config payload.

    Keep fields JSON-friendly (primitives, lists); tuples are written as lists.
    """
    schema_version: int = SCHEMA_VERSION
    csv_path: str = DEFAULT_CSV_PATH
    bar_padding: float = 0.2
    row_padding: float = 0.1
    box_padding: float = 0.1
    # None fits the box-plot axis to the observed min/max
    age_domain: Optional[tuple[float, float]] = DEFAULT_AGE_DOMAIN
    hours_domain: Optional[tuple[float, float]] = DEFAULT_HOURS_DOMAIN
    rate_domain_mode: str = "max"

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "schema_version": self.schema_version,
            "csv_path": self.csv_path,
            "bar_padding": self.bar_padding,
            "row_padding": self.row_padding,
            "box_padding": self.box_padding,
            "age_domain": None if self.age_domain is None else list(self.age_domain),
            "hours_domain": None if self.hours_domain is None else list(self.hours_domain),
            "rate_domain_mode": self.rate_domain_mode,
        }

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "DashboardConfigData":
        """
        Tolerant loader:
        - ignores unknown keys
        - tolerates partially missing values
        - replaces invalid values with defaults
        """
        defaults = cls()
        schema_version = int(d.get("schema_version", -1))
        csv_path = str(d.get("csv_path", defaults.csv_path))

        rate_domain_mode = str(d.get("rate_domain_mode", defaults.rate_domain_mode))
        if rate_domain_mode not in RATE_DOMAIN_MODES:
            logger.warning(f"Unknown rate_domain_mode {rate_domain_mode!r}, using 'max'")
            rate_domain_mode = defaults.rate_domain_mode

        known_keys = {
            "schema_version", "csv_path", "bar_padding", "row_padding", "box_padding",
            "age_domain", "hours_domain", "rate_domain_mode",
        }
        for key in d.keys():
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in dashboard config, ignoring")

        return cls(
            schema_version=schema_version,
            csv_path=csv_path,
            bar_padding=_parse_padding(d, "bar_padding", defaults.bar_padding),
            row_padding=_parse_padding(d, "row_padding", defaults.row_padding),
            box_padding=_parse_padding(d, "box_padding", defaults.box_padding),
            age_domain=_parse_domain(d, "age_domain", defaults.age_domain),
            hours_domain=_parse_domain(d, "hours_domain", defaults.hours_domain),
            rate_domain_mode=rate_domain_mode,
        )


class DashboardConfig:
    """
    Manager for loading/saving DashboardConfigData to disk.
    """

    def __init__(self, *, path: Path, data: Optional[DashboardConfigData] = None):
        self.path = path
        self.data = data if data is not None else DashboardConfigData()

    @staticmethod
    def default_config_path(
        app_name: str = "incomedash",
        filename: str = "dashboard_config.json",
        app_author: str | None = None,
    ) -> Path:
        """
        Determine OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/incomedash/dashboard_config.json
        Linux:   ~/.config/incomedash/dashboard_config.json
        Windows: %APPDATA%\\incomedash\\dashboard_config.json
        """
        return Path(user_config_dir(app_name, app_author)) / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        app_name: str = "incomedash",
        filename: str = "dashboard_config.json",
        app_author: str | None = None,
        create_if_missing: bool = False,
    ) -> "DashboardConfig":
        """
        Load config from disk.

        If file doesn't exist or is unreadable -> defaults.
        If schema mismatch -> defaults.
        If create_if_missing=True and file is missing -> immediately write defaults.
        """
        path = config_path or cls.default_config_path(app_name=app_name, filename=filename, app_author=app_author)
        default_data = DashboardConfigData()

        try:
            raw = path.read_text(encoding="utf-8")
            parsed = json.loads(raw)
        except FileNotFoundError:
            logger.debug(f"Dashboard config file not found at {path}, using defaults")
            cfg = cls(path=path, data=default_data)
            if create_if_missing:
                cfg.save()
            return cfg
        except json.JSONDecodeError as e:
            logger.warning(f"Dashboard config file at {path} is not valid JSON: {e}, using defaults")
            return cls(path=path, data=default_data)
        except OSError as e:
            logger.warning(f"Error reading dashboard config from {path}: {e}, using defaults")
            return cls(path=path, data=default_data)

        if not isinstance(parsed, dict):
            logger.warning(f"Dashboard config file at {path} does not contain a dict, using defaults")
            return cls(path=path, data=default_data)

        loaded = DashboardConfigData.from_json_dict(parsed)
        if loaded.schema_version != SCHEMA_VERSION:
            logger.warning(
                f"Dashboard config schema version mismatch: loaded={loaded.schema_version}, "
                f"expected={SCHEMA_VERSION}, resetting to defaults"
            )
            return cls(path=path, data=default_data)
        return cls(path=path, data=loaded)

    def save(self) -> None:
        """Write config to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            json_str = json.dumps(self.data.to_json_dict(), indent=2)
            self.path.write_text(json_str, encoding="utf-8")
            logger.info(f"Saved dashboard config to {self.path}")
        except OSError as e:
            logger.error(f"Error saving dashboard config to {self.path}: {e}")
            raise
