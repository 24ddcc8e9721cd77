"""
Lookup of code generators by target language.

Languages are registered under a primary name plus aliases; the module-level
registry knows the Rust and TypeScript generators.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from ..logging_config import get_logger
from .core.config import GeneratorConfig, get_config_manager, load_config
from .core.generator import CodeGenerator

logger = get_logger(__name__)

ConfigSource = Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]]


class RegistryError(Exception):
    """Exception raised for unknown languages and bad registrations."""

    pass


class GeneratorRegistry:
    """Maps language names and aliases to generator classes."""

    def __init__(self):
        self._generators: Dict[str, Type[CodeGenerator]] = {}
        self._aliases: Dict[str, str] = {}  # alias -> primary name

    def register(
        self,
        language: str,
        generator_class: Type[CodeGenerator],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register a generator class.

        Args:
            language: Primary language name, e.g. 'rust'
            generator_class: CodeGenerator subclass
            aliases: Extra names resolving to ``language``
            replace: Overwrite an existing registration instead of keeping it

        Raises:
            RegistryError: If the class is not a generator or an alias is taken
        """
        if not (
            isinstance(generator_class, type) and issubclass(generator_class, CodeGenerator)
        ):
            raise RegistryError(
                f"{generator_class!r}: generator class must inherit from CodeGenerator"
            )

        primary = language.lower()
        if primary in self._generators and not replace:
            logger.debug("%s generator already registered", primary)
            return

        alias_keys = [a.lower() for a in aliases or [] if a.lower() != primary]
        if not replace:
            for alias in alias_keys:
                if alias in self._generators:
                    raise RegistryError(f"Alias '{alias}' conflicts with a registered language")
                target = self._aliases.get(alias)
                if target is not None and target != primary:
                    raise RegistryError(f"Alias '{alias}' already points to '{target}'")

        self._generators[primary] = generator_class
        self._aliases.update((alias, primary) for alias in alias_keys)
        logger.debug("Registered %s -> %s", primary, generator_class.__name__)

    def unregister(self, language: str):
        """Remove a language and every alias pointing at it."""
        primary = language.lower()
        self._generators.pop(primary, None)
        self._aliases = {a: t for a, t in self._aliases.items() if t != primary}

    def resolve_language(self, language: str) -> str:
        """Return the primary name for a language name or alias."""
        key = language.lower()
        if key in self._generators:
            return key
        if key in self._aliases:
            return self._aliases[key]
        raise RegistryError(
            f"No generator registered for language: {language}. "
            f"Available: {', '.join(self.list_languages())}"
        )

    def get_generator_class(self, language: str) -> Type[CodeGenerator]:
        return self._generators[self.resolve_language(language)]

    def create_generator(self, language: str, config: ConfigSource = None) -> CodeGenerator:
        """
        Instantiate the generator for a language.

        ``config`` may be a ready GeneratorConfig, a dict of overrides or the
        path of a JSON config file; dicts and files are merged over the
        language defaults. Invalid settings raise RegistryError chained to the
        ConfigError describing them.
        """
        primary = self.resolve_language(language)

        if config is not None and not isinstance(config, (GeneratorConfig, dict, str, Path)):
            raise RegistryError(f"Invalid config type: {type(config).__name__}")

        try:
            if isinstance(config, GeneratorConfig):
                final_config = get_config_manager().check_config(config, primary)
            elif isinstance(config, dict):
                final_config = load_config(primary, custom_config=config)
            else:
                final_config = load_config(primary, config_file=config)
            return self._generators[primary](final_config)
        except Exception as e:
            raise RegistryError(f"Failed to create {primary} generator: {e}") from e

    def list_languages(self) -> List[str]:
        """Sorted primary language names."""
        return sorted(self._generators)

    def get_aliases_for_language(self, language: str) -> List[str]:
        primary = language.lower()
        return sorted(a for a, t in self._aliases.items() if t == primary)

    def is_supported(self, language: str) -> bool:
        key = language.lower()
        return key in self._generators or key in self._aliases

    def get_language_info(self, language: str) -> Dict[str, Any]:
        """Describe a registered language: name, class, extension, aliases."""
        primary = self.resolve_language(language)
        generator_class = self._generators[primary]
        generator = generator_class(load_config(primary))

        return {
            "name": generator.language_name,
            "class": generator_class.__name__,
            "module": generator_class.__module__,
            "file_extension": generator.file_extension,
            "aliases": self.get_aliases_for_language(primary),
        }


_global_registry: Optional[GeneratorRegistry] = None


def get_registry() -> GeneratorRegistry:
    """Return the shared registry, registering the built-in generators once."""
    global _global_registry
    if _global_registry is None:
        from .languages.rust import RustGenerator
        from .languages.typescript import TypeScriptGenerator

        _global_registry = GeneratorRegistry()
        _global_registry.register("rust", RustGenerator, aliases=["rs"])
        _global_registry.register("typescript", TypeScriptGenerator, aliases=["ts"])
    return _global_registry


def register_generator(
    language: str,
    generator_class: Type[CodeGenerator],
    aliases: Optional[List[str]] = None,
):
    """Register a generator in the shared registry."""
    get_registry().register(language, generator_class, aliases)


def get_generator(language: str, config: ConfigSource = None) -> CodeGenerator:
    """Create a configured generator from the shared registry."""
    return get_registry().create_generator(language, config)


def list_supported_languages() -> List[str]:
    return get_registry().list_languages()


def is_language_supported(language: str) -> bool:
    return get_registry().is_supported(language)


def get_language_info(language: str) -> Dict[str, Any]:
    return get_registry().get_language_info(language)
