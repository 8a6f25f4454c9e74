"""
DeckLab Configuration Management
=================================

Centralized configuration for the DeckLab toolkit using Python
dataclasses and TOML-based persistence.

Each TOML table maps onto one slotted dataclass; missing keys fall back
to dataclass defaults and unknown keys are ignored, so older config
files keep working as new settings are added.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

if TYPE_CHECKING:
    from decklab.core.models import CipherConfig


# ---------------------------------------------------------------------------
# Default configuration file path relative to the DeckLab root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "decklab.toml"


# ========================== Tool-Specific Configs ==========================


@dataclass(frozen=False, slots=True)
class GeneratorSettings:
    """Configuration for the transformation generator.

    ``max_attempts`` bounds the rejection-sampling loop per symbol;
    ``0`` leaves it unbounded.
    """

    seed: int = 42
    swap_count: int = 4
    rotation_max: int = 0
    rotation_constant: bool = False
    sliding_window: bool = False
    max_attempts: int = 0

    def __post_init__(self) -> None:
        if self.max_attempts < 0:
            raise ValueError(
                f"generator.max_attempts must be 0 (unbounded) or positive, got {self.max_attempts}"
            )

    def to_cipher_config(self) -> CipherConfig:
        """Build a validated :class:`CipherConfig` from these settings."""
        from decklab.core.models import CipherConfig

        return CipherConfig(
            swap_count=self.swap_count,
            rotation_max=self.rotation_max,
            rotation_constant=self.rotation_constant,
        )


@dataclass(frozen=False, slots=True)
class AnalysisSettings:
    """Configuration for isomorph analysis and its presentation."""

    top: int = 20
    rank_by_count: bool = False
    min_interestingness: float = 0.0


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging verbosity, output directory, version."""

    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_json: bool = False
    output_dir: str = "output"
    debug: bool = False
    version: str = "1.0.0"


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class DeckLabConfig:
    """Master configuration aggregating all settings.

    Usage:
        >>> config = DeckLabConfig.load()                  # from default path
        >>> config = DeckLabConfig.load("custom.toml")     # from custom path
        >>> print(config.generator.swap_count)
        4
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    generator: GeneratorSettings = field(default_factory=GeneratorSettings)
    analysis: AnalysisSettings = field(default_factory=AnalysisSettings)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> DeckLabConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``decklab.toml`` in the
        project root.  Missing keys gracefully fall back to dataclass
        defaults.

        Args:
            path: Filesystem path to a TOML configuration file.

        Returns:
            A fully-populated :class:`DeckLabConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
            ValueError: The file is not valid TOML or a setting is out of range.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            generator=cls._build_section(GeneratorSettings, raw.get("generator", {})),
            analysis=cls._build_section(AnalysisSettings, raw.get("analysis", {})),
        )

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares."""
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)
