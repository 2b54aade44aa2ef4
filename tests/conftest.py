"""Shared pytest fixtures for the ExpressOS test suite.

Provides reusable fixtures for:
- Default configuration
- Freshly scaffolded TypeScript and JavaScript projects
- Registry source samples
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from expressos.config import Config
from expressos.models import ProjectOptions
from expressos.scaffolder.generator import ProjectGenerator


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def config() -> Config:
    """Default configuration pointing at the packaged templates."""
    return Config()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep EXPRESSOS_* variables from the developer's shell out of tests."""
    for var in (
        "EXPRESSOS_TEMPLATE_DIR",
        "EXPRESSOS_STATIC_DIR",
        "EXPRESSOS_USECASE_PATH",
        "EXPRESSOS_DEFAULT_AUTHOR",
        "EXPRESSOS_DEFAULT_DESCRIPTION",
    ):
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Scaffolded projects
# ---------------------------------------------------------------------------

@pytest.fixture
async def ts_project(tmp_path: Path, config: Config) -> Path:
    """A freshly scaffolded TypeScript project; returns its root."""
    options = ProjectOptions.build("ts-service", typescript=True)
    result = await ProjectGenerator(options, config).generate(tmp_path)
    return result.root


@pytest.fixture
async def js_project(tmp_path: Path, config: Config) -> Path:
    """A freshly scaffolded JavaScript project; returns its root."""
    options = ProjectOptions.build("js-service", typescript=False)
    result = await ProjectGenerator(options, config).generate(tmp_path)
    return result.root


@pytest.fixture
def bare_project(tmp_path: Path) -> Path:
    """Just the marker directories of a project, with no registry file."""
    root = tmp_path / "bare"
    for rel in ("src", "src/framework", "src/modules"):
        (root / rel).mkdir(parents=True)
    return root


# ---------------------------------------------------------------------------
# Registry samples
# ---------------------------------------------------------------------------

@pytest.fixture
def ts_registry_source() -> str:
    """The services registry exactly as a new TypeScript project ships it."""
    return textwrap.dedent("""\
        // Services container

        export const services = {
          // Add your services here
          logger: {
            info: (message: string) => console.log(message),
            error: (message: string) => console.error(message),
          },
        };

        export type Services = typeof services;
    """)


@pytest.fixture
def js_registry_source() -> str:
    """The services registry exactly as a new JavaScript project ships it."""
    return textwrap.dedent("""\
        // Services container

        const services = {
          // Add your services here
          logger: {
            info: (message) => console.log(message),
            error: (message) => console.error(message),
          },
        };

        /** @typedef {typeof services} Services */

        module.exports = { services };
    """)
