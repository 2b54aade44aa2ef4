"""Incremental generators for an existing ExpressOS project.

Each generator renders one artifact from ``templates/<kind>/``:

- use case / module: ``input``, ``output``, ``useCase`` and ``index`` files
  under ``src/modules/<name>`` or ``src/modules/<domain>/<action>``
- service: ``src/services/<name>`` plus a services registry update
- middleware: ``src/middlewares/<name>``

The source language follows the project: ``.ts`` when ``tsconfig.json`` is
present, ``.js`` otherwise.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from ..config import Config
from ..errors import NotAProjectError
from ..models import ComponentKind, ComponentSpec, GenerationResult, derive_names
from ..utils import to_camel_case, to_pascal_case
from .registry import patch_registry
from .templates import TemplateRenderer


class ComponentGenerator:
    """Adds use cases, services, middlewares and modules to a project."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        self.renderer = TemplateRenderer(self.config.template_dir)

    # -- Public API --------------------------------------------------------

    async def generate(
        self,
        kind: ComponentKind | str,
        raw_name: str,
        cwd: str | Path,
        target_path: str | None = None,
    ) -> GenerationResult:
        """Generate one component inside the project rooted at *cwd*.

        Args:
            kind: Component kind, or a CLI type string such as ``"use-case"``.
            raw_name: ``"name"`` or ``"domain action"``.
            cwd: Project root.
            target_path: Use case/module location relative to *cwd*; defaults
                to ``src/modules``. Services and middlewares have fixed
                locations.

        Raises:
            NotAProjectError: If *cwd* is not a scaffolded project.
            InvalidInputError: For an unknown kind or a malformed name.
            RegistryFormatError: If the services registry cannot be parsed.
            FilesystemError: If a write fails.
        """
        root = Path(cwd).resolve()
        self.ensure_project(root)

        if not isinstance(kind, ComponentKind):
            kind = ComponentKind.parse(kind)
        spec = ComponentSpec.build(kind, raw_name, self._target_for(kind, target_path))
        typescript = is_typescript_project(root)

        if kind in (ComponentKind.USECASE, ComponentKind.MODULE):
            return await self.generate_usecase(spec, root, typescript)
        if kind is ComponentKind.SERVICE:
            return await self.generate_service(spec, root, typescript)
        return await self.generate_middleware(spec, root, typescript)

    def ensure_project(self, root: Path) -> None:
        """Raise ``NotAProjectError`` unless every project marker exists."""
        missing = [m for m in self.config.project_markers if not (root / m).is_dir()]
        if missing:
            raise NotAProjectError(root, missing)

    # -- Generators --------------------------------------------------------

    async def generate_usecase(
        self, spec: ComponentSpec, root: Path, typescript: bool
    ) -> GenerationResult:
        """Render a use case module; ``module`` requests land here too."""
        names = derive_names(spec.raw_name)
        module_dir = root / spec.target_path
        for part in names.module_parts:
            module_dir = module_dir / part

        context = {
            **_language_context(typescript),
            "pascal_name": names.pascal_name,
            "camel_name": names.camel_name,
            "route": names.route,
            "relative_root": names.relative_root,
        }
        files = await self.renderer.render_tree("usecase", module_dir, context)
        return GenerationResult(root=module_dir, files=files)

    async def generate_service(
        self, spec: ComponentSpec, root: Path, typescript: bool
    ) -> GenerationResult:
        """Render a service and register it in the services registry."""
        camel = to_camel_case(spec.raw_name)
        context = {
            **_language_context(typescript),
            "pascal_name": to_pascal_case(spec.raw_name),
            "camel_name": camel,
        }
        services_dir = root / spec.target_path
        files = await self.renderer.render_tree("service", services_dir, context)
        result = GenerationResult(root=services_dir, files=files)

        registry = self.config.registry_file(root, typescript)
        if not registry.is_file():
            result.warnings.append(
                f"Services registry not found at {registry}; register {camel}Service manually"
            )
            return result

        result.registry_updated = await asyncio.to_thread(
            patch_registry, registry, camel, typescript
        )
        return result

    async def generate_middleware(
        self, spec: ComponentSpec, root: Path, typescript: bool
    ) -> GenerationResult:
        """Render a middleware factory."""
        context = {
            **_language_context(typescript),
            "pascal_name": to_pascal_case(spec.raw_name),
            "camel_name": to_camel_case(spec.raw_name),
        }
        middlewares_dir = root / spec.target_path
        files = await self.renderer.render_tree("middleware", middlewares_dir, context)
        return GenerationResult(root=middlewares_dir, files=files)

    # -- Helpers -----------------------------------------------------------

    def _target_for(self, kind: ComponentKind, target_path: str | None) -> str:
        if kind is ComponentKind.SERVICE:
            return self.config.services_path
        if kind is ComponentKind.MIDDLEWARE:
            return self.config.middlewares_path
        return target_path or self.config.usecase_path


def is_typescript_project(root: Path) -> bool:
    """A project is TypeScript when it has a ``tsconfig.json``."""
    return (root / "tsconfig.json").is_file()


def _language_context(typescript: bool) -> dict[str, Any]:
    return {"typescript": typescript, "ext": "ts" if typescript else "js"}
