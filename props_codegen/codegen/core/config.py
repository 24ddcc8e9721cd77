"""
Generator configuration.

Per-language defaults are layered with an optional JSON file and then with
keyword overrides. Keys that are not GeneratorConfig fields are
language-specific and end up in ``GeneratorConfig.custom``.
"""

import copy
import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class ConfigError(Exception):
    """Raised for unreadable or malformed configuration."""

    pass


DEFAULT_HEADER_COMMENT = "Generated by props-codegen. Do not edit by hand."

VALID_COLLISION_POLICIES = {"suffix", "error"}
VALID_DECLARATION_KEYWORDS = {"const", "let", "var"}
VALID_LINE_ENDINGS = {"\n", "\r\n"}


@dataclass
class GeneratorConfig:
    """Settings shared by all generators."""

    output_file: Optional[str] = None
    struct_name: Optional[str] = None  # None keeps the schema name

    # Layout
    indent_size: int = 4
    use_tabs: bool = False
    line_ending: str = "\n"

    add_comments: bool = False
    header_comment: str = DEFAULT_HEADER_COMMENT

    # What to do when two fields map to the same target name
    name_collision: str = "suffix"

    # Language-specific settings
    custom: Dict[str, Any] = field(default_factory=dict)


_GENERATOR_FIELDS = {f.name for f in fields(GeneratorConfig)}

LANGUAGE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "rust": {
        "custom": {
            "derives": ["Debug", "Clone"],
            "visibility": "pub",
            "field_visibility": "",
        },
    },
    "typescript": {
        "name_collision": "suffix",
        "custom": {"declaration_keyword": "const"},
    },
}


class ConfigManager:
    """Builds GeneratorConfig objects from defaults, files and overrides."""

    def __init__(self):
        self._configs: Dict[str, Dict[str, Any]] = copy.deepcopy(LANGUAGE_DEFAULTS)

    def get_config(
        self,
        language: str,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Resolve the configuration for a language.

        Args:
            language: Primary language name
            custom_config: Overrides applied last
            config_file: JSON file applied over the defaults

        Returns:
            GeneratorConfig with ``custom`` merged key by key

        Raises:
            ConfigError: If the file is missing or not a JSON object, or a
                resolved value is invalid
        """
        merged = copy.deepcopy(self._configs.get(language, {}))
        if config_file:
            self._merge(merged, self._load_config_file(config_file))
        if custom_config:
            self._merge(merged, custom_config)
        return self.check_config(self._dict_to_config(merged), language)

    @staticmethod
    def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        for key, value in overrides.items():
            if key == "custom" and isinstance(value, dict):
                base.setdefault("custom", {}).update(copy.deepcopy(value))
            else:
                base[key] = copy.deepcopy(value)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")
        if path.suffix.lower() != ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")
        return data

    @staticmethod
    def _dict_to_config(values: Dict[str, Any]) -> GeneratorConfig:
        known = {k: v for k, v in values.items() if k in _GENERATOR_FIELDS}
        extra = {k: v for k, v in values.items() if k not in _GENERATOR_FIELDS}
        if extra:
            known["custom"] = {**known.get("custom", {}), **extra}
        return GeneratorConfig(**known)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Write a configuration as JSON that ``config_file`` can load back."""
        path = Path(output_path)
        try:
            path.write_text(
                json.dumps(asdict(config), indent=2, ensure_ascii=False), encoding="utf-8"
            )
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def check_config(self, config: GeneratorConfig, language: str) -> GeneratorConfig:
        """Return ``config`` unchanged, or raise ConfigError listing every invalid value."""
        problems = self.validate_config(config, language)
        if problems:
            raise ConfigError(f"Invalid {language} configuration: {'; '.join(problems)}")
        return config

    def list_languages(self) -> List[str]:
        return list(self._configs)

    def validate_config(self, config: GeneratorConfig, language: str) -> List[str]:
        """Return a warning for each invalid setting; an empty list means valid."""
        warnings = []

        if config.name_collision not in VALID_COLLISION_POLICIES:
            warnings.append(f"Invalid name_collision: {config.name_collision}")
        if config.line_ending not in VALID_LINE_ENDINGS:
            warnings.append(f"Invalid line_ending: {config.line_ending!r}")
        if not isinstance(config.indent_size, int) or config.indent_size < 0:
            warnings.append(f"Invalid indent_size: {config.indent_size}")
        if config.struct_name is not None and not config.struct_name.isidentifier():
            warnings.append(f"Invalid struct_name: {config.struct_name}")

        if language == "rust":
            derives = config.custom.get("derives", [])
            if not isinstance(derives, list) or not all(
                isinstance(d, str) and d.isidentifier() for d in derives
            ):
                warnings.append(f"Invalid derives: {derives}")
        elif language == "typescript":
            keyword = config.custom.get("declaration_keyword", "const")
            if keyword not in VALID_DECLARATION_KEYWORDS:
                warnings.append(f"Invalid declaration_keyword: {keyword}")

        return warnings


_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Return the shared ConfigManager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str,
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """Resolve a language configuration through the shared ConfigManager."""
    return get_config_manager().get_config(language, custom_config, config_file)
