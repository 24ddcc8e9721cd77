"""Pytest configuration and shared fixtures for props_codegen tests."""

import logging
from pathlib import Path

import pytest

from props_codegen.logging_config import LOGGER_NAME

PROPS_SOURCE = """\
use std::collections::HashMap;

/// Shared between the Rust side and the web client.
#[derive(Debug)]
pub struct Props {
    user_id: u32,
    name: String,
    is_active: bool,
}

fn main() {
    println!("{}", 1);
}
"""


@pytest.fixture
def props_source():
    """Source text of the canonical three-field Props struct."""
    return PROPS_SOURCE


@pytest.fixture
def write_source(tmp_path):
    """Factory writing Rust source text to a file under tmp_path."""

    def _write(text: str, name: str = "props.rs") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def props_file(write_source, props_source):
    return write_source(props_source)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo configure_logging() calls so tests do not leak handlers."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)
