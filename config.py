"""Configuração da aplicação."""
import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "autodoc.config.json"

DEFAULT_EXCLUDE_PATTERNS = [
    "**/*.spec.ts",
    "**/*.test.ts",
    "**/node_modules/**",
]

PRIMITIVE_UNION_MODES = ("first", "one_of")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class JsonOutputConfig:
    """JSON output settings."""

    output_dir: str = "./docs"
    filename: str = "analysis.json"
    format: str = "json-pretty"  # "json-pretty" or "json"

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir) / self.filename

    @property
    def pretty(self) -> bool:
        return self.format != "json"


@dataclass
class AnalysisConfig:
    """Analysis settings."""

    include_private: bool = False
    verbose: bool = False
    color_output: bool = True
    primitive_union_mode: str = "first"  # "first" or "one_of"
    exclude_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))


@dataclass
class AppConfig:
    """Configuração da aplicação."""

    json: JsonOutputConfig = None
    analysis: AnalysisConfig = None

    def __post_init__(self):
        """Inicializa valores padrão."""
        if self.json is None:
            self.json = JsonOutputConfig()
        if self.analysis is None:
            self.analysis = AnalysisConfig()

    @classmethod
    def from_env(cls, base: Optional["AppConfig"] = None) -> "AppConfig":
        """Carrega config de variáveis de ambiente (sobre `base`)."""
        config = base or cls()
        config.json.output_dir = os.getenv("AUTODOC_OUTPUT_DIR", config.json.output_dir)
        config.json.filename = os.getenv("AUTODOC_OUTPUT_FILE", config.json.filename)
        config.analysis.verbose = _env_flag("AUTODOC_VERBOSE", config.analysis.verbose)
        config.analysis.include_private = _env_flag(
            "AUTODOC_INCLUDE_PRIVATE", config.analysis.include_private
        )
        if _env_flag("AUTODOC_NO_COLOR", False):
            config.analysis.color_output = False
        return config

    @classmethod
    def load(cls, path: Optional[str] = None) -> "AppConfig":
        """
        Load the config file merged over the defaults.

        A missing file gives the defaults; an unreadable one logs a warning
        and gives the defaults.
        """
        config_path = Path(path) if path else Path.cwd() / CONFIG_FILENAME
        config = cls()
        if not config_path.exists():
            return config

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read {config_path}, using defaults: {e}")
            return config

        if not isinstance(data, dict):
            logger.warning(f"Ignoring {config_path}: expected a JSON object")
            return config

        _merge(config.json, data.get("json"))
        _merge(config.analysis, data.get("analysis"))
        if config.analysis.primitive_union_mode not in PRIMITIVE_UNION_MODES:
            logger.warning(
                f"Unknown primitive_union_mode {config.analysis.primitive_union_mode!r}, using 'first'"
            )
            config.analysis.primitive_union_mode = "first"
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"json": asdict(self.json), "analysis": asdict(self.analysis)}

    def write_default(self, path: Optional[str] = None) -> Path:
        """Write this config as JSON (default: ./autodoc.config.json)."""
        config_path = Path(path) if path else Path.cwd() / CONFIG_FILENAME
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        return config_path


def _merge(target: Any, values: Any) -> None:
    """Copy known keys of a JSON section onto a config dataclass."""
    if not isinstance(values, dict):
        return
    known = {f.name for f in fields(target)}
    for key, value in values.items():
        if key in known:
            setattr(target, key, value)
        else:
            logger.warning(f"Unknown config key ignored: {key}")
