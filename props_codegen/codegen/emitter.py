"""
Emission of generated code to files.

Thin layer over the registry and ``generate_code``: render a schema for a
language, then write the document atomically to its destination.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from ..logging_config import get_logger
from ..utils import write_output
from .core.config import GeneratorConfig
from .core.generator import GenerationResult, GeneratorError, generate_code
from .core.schema import Schema
from .registry import get_generator

logger = get_logger(__name__)

ConfigLike = Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]]


def render_schema(
    schema: Schema, language: str, config: ConfigLike = None
) -> GenerationResult:
    """
    Render a schema for one target language without touching the filesystem.

    Args:
        schema: Schema to render
        language: Language name or alias ('rust', 'ts', ...)
        config: GeneratorConfig, override dict or config file path

    Returns:
        GenerationResult; check ``success`` before using ``code``
    """
    generator = get_generator(language, config)
    result = generate_code(generator, schema)

    for warning in result.warnings:
        logger.debug("%s: %s", generator.language_name, warning)
    if not result.success:
        logger.error("%s rendering failed: %s", language, result.error_message)

    return result


def emit_schema(
    schema: Schema,
    path: Union[str, Path],
    language: str,
    config: ConfigLike = None,
) -> GenerationResult:
    """
    Render a schema and write it to ``path``.

    Raises:
        GeneratorError: If rendering fails
        PropsIOError: If the destination cannot be written
    """
    result = render_schema(schema, language, config)
    if not result.success:
        raise GeneratorError(result.error_message) from result.exception

    written = write_output(path, result.code)
    result.metadata["output_file"] = str(written)
    logger.info(
        "Wrote %d %s declarations to %s",
        len(schema),
        result.metadata.get("language", language),
        written,
    )
    return result


def write_rust_module(
    schema: Schema, path: Union[str, Path], config: ConfigLike = None
) -> GenerationResult:
    """Write the schema as a Rust struct definition."""
    return emit_schema(schema, path, "rust", config)


def write_typescript_declarations(
    schema: Schema, path: Union[str, Path], config: ConfigLike = None
) -> GenerationResult:
    """Write the schema as TypeScript ambient declarations."""
    return emit_schema(schema, path, "typescript", config)


def generate_artifacts(
    source_path: Union[str, Path],
    rust_path: Union[str, Path],
    ts_path: Union[str, Path],
    extractor_config=None,
    rust_config: ConfigLike = None,
    ts_config: ConfigLike = None,
) -> Tuple[GenerationResult, GenerationResult]:
    """
    Run the whole pipeline: extract the schema, then write both outputs.

    Args:
        source_path: Rust source declaring the schema struct
        rust_path: Destination of the regenerated Rust module
        ts_path: Destination of the TypeScript declarations
        extractor_config: Optional ExtractorConfig
        rust_config: Configuration for the Rust generator
        ts_config: Configuration for the TypeScript generator

    Returns:
        Tuple of (rust_result, typescript_result)
    """
    from ..extractor import extract

    extraction = extract(source_path, extractor_config)
    schema = extraction.schema

    # Both documents are rendered before either is written
    rust_result = render_schema(schema, "rust", rust_config)
    ts_result = render_schema(schema, "typescript", ts_config)
    for result in (rust_result, ts_result):
        if not result.success:
            raise GeneratorError(result.error_message) from result.exception

    for result, path in ((rust_result, rust_path), (ts_result, ts_path)):
        result.warnings = extraction.warnings + result.warnings
        result.metadata["output_file"] = str(write_output(path, result.code))

    logger.info(
        "Generated %s and %s from %s (%d fields, %d skipped)",
        rust_path,
        ts_path,
        source_path,
        len(schema),
        len(extraction.skipped),
    )
    return rust_result, ts_result
