"""Linter configuration loaded from ``.docs-lint.yaml``."""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from docs_corpus.utils.logger import get_logger

LOGGER = get_logger(__name__)

CONFIG_FILENAMES = (".docs-lint.yaml", ".docs-lint.yml")
RULE_LEVELS = ("off", "error", "warning", "info")


class ConfigError(ValueError):
    """Raised for unreadable or invalid configuration."""


@dataclass(slots=True)
class ExternalLinkSettings:
    enabled: bool = False
    timeout: float = 10.0
    workers: int = 10
    user_agent: str = "docs-corpus-lint/0.1 (+link check)"


@dataclass(slots=True)
class LintConfig:
    """Settings for one lint run; relative paths are resolved against ``base_dir``."""

    base_dir: Path = field(default_factory=Path.cwd)
    docs_dir: str = "docs"
    extensions: List[str] = field(default_factory=lambda: [".md", ".mdx"])
    exclude: List[str] = field(default_factory=list)
    sidebars: Optional[str] = None
    route_base_path: str = "docs"
    static_dirs: List[str] = field(default_factory=lambda: ["static"])
    code_languages: Optional[List[str]] = None
    rules: Dict[str, str] = field(default_factory=dict)
    external_links: ExternalLinkSettings = field(default_factory=ExternalLinkSettings)

    @property
    def docs_root(self) -> Path:
        return (self.base_dir / self.docs_dir).resolve()

    @property
    def sidebars_path(self) -> Optional[Path]:
        if not self.sidebars:
            return None
        return (self.base_dir / self.sidebars).resolve()

    @property
    def static_paths(self) -> List[Path]:
        return [(self.base_dir / directory).resolve() for directory in self.static_dirs]

    def rule_level(self, rule_id: str) -> Optional[str]:
        return self.rules.get(rule_id)

    def with_overrides(self, **overrides: Any) -> "LintConfig":
        """Return a copy with the non-``None`` overrides applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


def load_config(path: Optional[Path] = None, base_dir: Optional[Path] = None) -> LintConfig:
    """Load the configuration file at ``path`` or discover one in ``base_dir``."""
    base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
    if path is None:
        for name in CONFIG_FILENAMES:
            candidate = base_dir / name
            if candidate.is_file():
                path = candidate
                break
        else:
            LOGGER.debug("No configuration file in %s; using defaults", base_dir)
            return LintConfig(base_dir=base_dir)

    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise ConfigError(f"Configuration file {path} is not valid UTF-8: {exc.reason}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Configuration file {path} is not valid YAML: {exc}") from exc

    LOGGER.debug("Loaded configuration from %s", path)
    return config_from_mapping(data or {}, base_dir=path.parent)


def config_from_mapping(data: Mapping[str, Any], base_dir: Path) -> LintConfig:
    """Validate a raw mapping and turn it into a :class:`LintConfig`."""
    if not isinstance(data, Mapping):
        raise ConfigError("Configuration must be a mapping")

    known = {f.name for f in fields(LintConfig)} - {"base_dir"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    config = LintConfig(base_dir=Path(base_dir))
    for key in ("docs_dir", "route_base_path"):
        if key in data:
            setattr(config, key, _require_str(data[key], key))
    if "sidebars" in data:
        config.sidebars = None if data["sidebars"] is None else _require_str(data["sidebars"], "sidebars")
    for key in ("extensions", "exclude", "static_dirs"):
        if key in data:
            setattr(config, key, _require_str_list(data[key], key))
    config.extensions = [ext if ext.startswith(".") else f".{ext}" for ext in config.extensions]
    if data.get("code_languages") is not None:
        config.code_languages = _require_str_list(data["code_languages"], "code_languages")
    if "rules" in data:
        config.rules = _parse_rules(data["rules"])
    if "external_links" in data:
        config.external_links = _parse_external(data["external_links"])
    config.route_base_path = config.route_base_path.strip("/")
    return config


def _parse_rules(raw: Any) -> Dict[str, str]:
    if not isinstance(raw, Mapping):
        raise ConfigError("'rules' must map rule ids to levels")
    rules: Dict[str, str] = {}
    for rule_id, level in raw.items():
        # YAML reads a bare ``off`` as False.
        level = "off" if level is False else str(level).lower()
        if level not in RULE_LEVELS:
            raise ConfigError(f"Rule {rule_id!r}: level must be one of {', '.join(RULE_LEVELS)}, got {level!r}")
        rules[str(rule_id)] = level
    return rules


def _parse_external(raw: Any) -> ExternalLinkSettings:
    if isinstance(raw, bool):
        return ExternalLinkSettings(enabled=raw)
    if not isinstance(raw, Mapping):
        raise ConfigError("'external_links' must be a boolean or a mapping")
    settings = ExternalLinkSettings()
    unknown = sorted(set(raw) - {f.name for f in fields(ExternalLinkSettings)})
    if unknown:
        raise ConfigError(f"Unknown external_links keys: {', '.join(unknown)}")
    if "enabled" in raw:
        if not isinstance(raw["enabled"], bool):
            raise ConfigError("'external_links.enabled' must be true or false")
        settings.enabled = raw["enabled"]
    try:
        if "timeout" in raw:
            settings.timeout = float(raw["timeout"])
        if "workers" in raw:
            settings.workers = int(raw["workers"])
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid external_links value: {exc}") from exc
    if settings.timeout <= 0 or settings.workers < 1:
        raise ConfigError("external_links timeout must be positive and workers at least 1")
    if "user_agent" in raw:
        settings.user_agent = _require_str(raw["user_agent"], "external_links.user_agent")
    return settings


def _require_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{key!r} must be a string")
    return value


def _require_str_list(value: Any, key: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key!r} must be a list of strings")
    return list(value)
