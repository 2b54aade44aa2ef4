"""Data models for the ExpressOS scaffolder.

``ProjectOptions`` drives a scaffold run, ``ComponentSpec`` drives a single
generator run, and ``DerivedNames`` carries the file, symbol and route names
computed from a component's raw name.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import InvalidInputError
from .utils import to_camel_case, to_kebab_case, to_pascal_case, validate_project_name


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ComponentKind(str, Enum):
    """Artifacts the generators can add to an existing project."""
    USECASE = "usecase"
    SERVICE = "service"
    MIDDLEWARE = "middleware"
    MODULE = "module"

    @classmethod
    def parse(cls, value: str) -> "ComponentKind":
        """Resolve a CLI type string, accepting ``use-case`` as an alias."""
        normalized = value.strip().lower()
        if normalized == "use-case":
            normalized = cls.USECASE.value
        for kind in cls:
            if kind.value == normalized:
                return kind
        supported = ", ".join(kind.value for kind in cls)
        raise InvalidInputError(
            f"Unknown component type: {value}. Supported types: {supported}"
        )


# ---------------------------------------------------------------------------
# Input records
# ---------------------------------------------------------------------------

class ProjectOptions(BaseModel):
    """Options collected from the CLI for one scaffold run."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project directory and package name")
    description: Optional[str] = Field(default=None)
    author: Optional[str] = Field(default=None)
    typescript: bool = Field(default=True, description="Generate TypeScript sources")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        verdict = validate_project_name(value)
        if verdict is not True:
            raise ValueError(verdict)
        return value

    @classmethod
    def build(
        cls,
        name: str | None,
        description: str | None = None,
        author: str | None = None,
        typescript: bool = True,
    ) -> "ProjectOptions":
        """Validate *name* and construct the options.

        Raises:
            InvalidInputError: If the project name is rejected.
        """
        verdict = validate_project_name(name)
        if verdict is not True:
            raise InvalidInputError(verdict)
        return cls(
            name=name,
            description=description or None,
            author=author or None,
            typescript=typescript,
        )


_COMPONENT_WORD = re.compile(r"[A-Za-z][A-Za-z0-9_-]*")


def validate_component_name(raw_name: str) -> list[str]:
    """Split *raw_name* into one or two words, rejecting anything else.

    Raises:
        InvalidInputError: For an empty name, more than two words, or a word
            that cannot become an identifier.
    """
    words = raw_name.split()
    if not words:
        raise InvalidInputError("Component name is required")
    if len(words) > 2:
        raise InvalidInputError(
            'Component name should be either "name" or "domain action"'
        )
    for word in words:
        if not _COMPONENT_WORD.fullmatch(word):
            raise InvalidInputError(
                f'Invalid component name "{word}": it must start with a letter and '
                "contain only letters, numbers, hyphens, and underscores"
            )
    return words


class ComponentSpec(BaseModel):
    """One generator request: what to add, under which name, and where."""

    model_config = ConfigDict(frozen=True)

    kind: ComponentKind
    raw_name: str
    target_path: str

    @property
    def words(self) -> list[str]:
        return self.raw_name.split()

    @property
    def hierarchical(self) -> bool:
        return len(self.words) == 2

    @classmethod
    def build(cls, kind: ComponentKind, raw_name: str, target_path: str) -> "ComponentSpec":
        """Validate the name and construct the spec.

        Raises:
            InvalidInputError: If the name is not one or two valid words.
        """
        words = validate_component_name(raw_name)
        return cls(kind=kind, raw_name=" ".join(words), target_path=target_path)


# ---------------------------------------------------------------------------
# Derived values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DerivedNames:
    """Names computed from a use case's raw name.

    ``import_depth`` is the number of ``../`` hops from the module directory
    back to ``src``: 2 for ``modules/<name>``, 3 for ``modules/<domain>/<action>``.
    """

    pascal_name: str
    camel_name: str
    kebab_route: str
    module_parts: tuple[str, ...]
    import_depth: int

    @property
    def relative_root(self) -> str:
        return "../" * self.import_depth

    @property
    def route(self) -> str:
        return f"/api/{self.kebab_route}"


def derive_names(raw_name: str) -> DerivedNames:
    """Compute use case names for a flat ``name`` or a ``domain action`` pair."""
    words = validate_component_name(raw_name)
    if len(words) == 1:
        word = words[0]
        camel = to_camel_case(word)
        return DerivedNames(
            pascal_name=to_pascal_case(word),
            camel_name=camel,
            kebab_route=to_kebab_case(word),
            module_parts=(camel,),
            import_depth=2,
        )

    domain, action = words
    return DerivedNames(
        pascal_name=to_pascal_case(f"{domain} {action}"),
        camel_name=to_camel_case(action),
        kebab_route=f"{to_kebab_case(domain)}/{to_kebab_case(action)}",
        module_parts=(to_camel_case(domain), to_camel_case(action)),
        import_depth=3,
    )


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FileWrite:
    """A single file to be written; produced and flushed immediately."""

    path: Path
    content: str


@dataclass
class GenerationResult:
    """Files written by a scaffold or generator run."""

    root: Path
    files: list[Path] = field(default_factory=list)
    registry_updated: bool = False
    warnings: list[str] = field(default_factory=list)
