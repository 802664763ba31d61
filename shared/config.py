"""
elfsize Configuration Management
==================================

Centralized configuration for the elfsize toolkit using Python
dataclasses and TOML-based persistence.

Configuration is optional: the calculator runs on pure defaults when no
``config.toml`` is present.  CLI flags take precedence over anything
loaded from disk.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"

OUTPUT_FORMATS: tuple[str, ...] = ("plain", "json", "table")


# ========================== Tool-Specific Config ===========================


@dataclass(frozen=False, slots=True)
class ElfSizeConfig:
    """Configuration for the ELF size calculator and its CLI.

    ``output_format`` selects how the CLI reports a successful result:
    ``plain`` prints only the decimal size, ``json`` dumps the full
    result model and ``table`` renders the pipeline values with Rich.
    """

    output_format: str = "plain"
    warn_on_trailing_data: bool = False

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {', '.join(OUTPUT_FORMATS)}; "
                f"got {self.output_format!r}"
            )


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Logging and diagnostics settings shared by every component."""

    log_level: str = "WARNING"
    log_file: str = ""  # empty disables file logging
    log_json: bool = False
    debug: bool = False


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class AppConfig:
    """Master configuration aggregating global and tool settings.

    Usage:
        >>> config = AppConfig.load()                  # from default path
        >>> config = AppConfig.load("custom.toml")     # from custom path
        >>> config.elfsize.output_format
        'plain'
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    elfsize: ElfSizeConfig = field(default_factory=ElfSizeConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> AppConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root.  Missing keys fall back to dataclass defaults.

        Args:
            path: Filesystem path to a TOML configuration file.

        Returns:
            A fully-populated :class:`AppConfig` instance.

        Raises:
            FileNotFoundError: If *path* was given explicitly and does
                not exist.
            ValueError: If a value is out of its allowed set.
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
            elfsize=cls._build_section(ElfSizeConfig, raw.get("elfsize", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


# ========================= Module-level convenience ========================

def get_config(path: str | Path | None = None) -> AppConfig:
    """Module-level convenience wrapper around :meth:`AppConfig.load`.

    Caches the result so that repeated calls share one instance.
    """
    if not hasattr(get_config, "_cached") or path is not None:
        get_config._cached = AppConfig.load(path)  # type: ignore[attr-defined]
    return get_config._cached  # type: ignore[attr-defined]
