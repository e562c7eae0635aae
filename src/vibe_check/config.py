"""Configuration loading and management for vibe-check.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.vibe-check.toml)
    3. Project config (./vibe-check.toml)
    4. Explicit config file
    5. Environment variables (VIBE_CHECK_* prefix)
    6. Overrides (passed as kwargs)

Example:
    >>> config = load_config(verbose=True, session_gap_minutes=60)
    >>> config.verbosity
    'verbose'
    >>> config.session_gap_minutes
    60
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import VibeCheckError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "VIBE_CHECK_"


@dataclass(frozen=True)
class ThresholdConfig:
    """Metric windows, baselines and learning policy.

    Attributes:
        Trust pass rate:
            followup_window_minutes: A fix this soon after a commit marks it untrusted

        File churn:
            churn_window_minutes: Window in which repeated touches count as churn
            churn_touch_threshold: Touches inside the window that churn a file

        Time spiral:
            rapid_commit_minutes: Gap below which consecutive commits are "rapid"

        Velocity anomaly:
            velocity_baseline_mean: Default commits/hour when no history exists
            velocity_baseline_std: Default spread of commits/hour

        VibeScore weights (must sum to 1.0):
            file_churn_weight, time_spiral_weight,
            velocity_anomaly_weight, code_stability_weight

        Calibration:
            retrain_sample_interval: Retrain whenever sample count is a multiple of this
            retrain_ece_threshold: Retrain when stored ECE exceeds this
            min_samples_for_retrain: Never retrain below this many samples
            learning_rate: Step size for the ordinal model refit
    """

    followup_window_minutes: float = 30.0

    churn_window_minutes: float = 60.0
    churn_touch_threshold: int = 3

    rapid_commit_minutes: float = 5.0

    # ~20 minute work cycles; +-2 sigma spans 0-6 commits/hour
    velocity_baseline_mean: float = 3.0
    velocity_baseline_std: float = 1.5

    file_churn_weight: float = 0.30
    time_spiral_weight: float = 0.25
    velocity_anomaly_weight: float = 0.20
    code_stability_weight: float = 0.25

    retrain_sample_interval: int = 10
    retrain_ece_threshold: float = 0.15
    min_samples_for_retrain: int = 5
    learning_rate: float = 0.05

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        if self.churn_touch_threshold < 2:
            raise ValueError("churn_touch_threshold must be at least 2")

        for field_name in (
            "followup_window_minutes",
            "churn_window_minutes",
            "rapid_commit_minutes",
            "velocity_baseline_mean",
            "learning_rate",
        ):
            if getattr(self, field_name) <= 0:
                raise ValueError(f"{field_name} must be positive")

        if self.velocity_baseline_std < 0:
            raise ValueError("velocity_baseline_std must be non-negative")

        weight_sum = (
            self.file_churn_weight
            + self.time_spiral_weight
            + self.velocity_anomaly_weight
            + self.code_stability_weight
        )
        if not 0.99 <= weight_sum <= 1.01:
            raise ValueError(f"VibeScore weights must sum to 1.0, got {weight_sum:.3f}")

        if self.retrain_sample_interval < 1:
            raise ValueError("retrain_sample_interval must be at least 1")
        if not 0.0 <= self.retrain_ece_threshold <= 1.0:
            raise ValueError("retrain_ece_threshold must be between 0.0 and 1.0")
        if self.min_samples_for_retrain < 1:
            raise ValueError("min_samples_for_retrain must be at least 1")


DEFAULT_THRESHOLDS = ThresholdConfig()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        Sessions:
            session_gap_minutes: Inactivity gap that ends a session for active-time
                accounting (velocity, flow efficiency)
            session_detection_gap_minutes: Inactivity gap used when listing sessions
            min_minutes_per_commit: Minimum active time credited per commit

        Git integration:
            git_max_commits: Maximum commits read from git log (0 = unlimited)
            git_timeout_seconds: Timeout for a single git invocation
            min_commits_for_metrics: Commits needed before metrics feed the model

        Storage:
            data_dir: Dot-directory under the repository root for local state

        Output control:
            verbosity: Logging verbosity level
    """

    session_gap_minutes: int = 120
    session_detection_gap_minutes: int = 90
    min_minutes_per_commit: int = 10

    git_max_commits: int = 5000
    git_timeout_seconds: int = 30
    min_commits_for_metrics: int = 3

    data_dir: str = ".vibe-check"

    verbosity: Verbosity = "normal"

    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.session_gap_minutes < 1:
            raise ValueError("session_gap_minutes must be at least 1")
        if self.session_detection_gap_minutes < 1:
            raise ValueError("session_detection_gap_minutes must be at least 1")
        if self.min_minutes_per_commit < 0:
            raise ValueError("min_minutes_per_commit must be non-negative")

        if self.git_max_commits < 0:
            raise ValueError("git_max_commits must be non-negative")
        if self.git_timeout_seconds < 1:
            raise ValueError("git_timeout_seconds must be at least 1")
        if self.min_commits_for_metrics < 0:
            raise ValueError("min_commits_for_metrics must be non-negative")

        if not self.data_dir or Path(self.data_dir).is_absolute():
            raise ValueError("data_dir must be a relative directory name")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        VibeCheckError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".vibe-check.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise VibeCheckError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "vibe-check.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise VibeCheckError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise VibeCheckError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise VibeCheckError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    thresholds_dict = merged.pop("thresholds", None)
    if thresholds_dict is not None:
        if isinstance(thresholds_dict, dict):
            try:
                merged["thresholds"] = ThresholdConfig(**thresholds_dict)
            except (TypeError, ValueError) as e:
                raise VibeCheckError(f"Invalid [thresholds] config: {e}")
        elif isinstance(thresholds_dict, ThresholdConfig):
            merged["thresholds"] = thresholds_dict

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise VibeCheckError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from VIBE_CHECK_* environment variables.

    Only top-level AnalysisConfig fields are read, e.g.
    VIBE_CHECK_SESSION_GAP_MINUTES=90 or VIBE_CHECK_VERBOSITY=quiet.

    Returns:
        Dict of field_name -> parsed_value for any VIBE_CHECK_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise VibeCheckError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the field's type.

    Returns:
        Parsed value or None when the type is not env-configurable

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise VibeCheckError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
