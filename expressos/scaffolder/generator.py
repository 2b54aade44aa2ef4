"""Main scaffolding orchestrator.

Takes ``ProjectOptions`` and generates a complete Express project directory
following the ExpressOS clean-architecture layout:

    <name>/
        package.json, tsconfig.json (TypeScript only), README.md,
        .eslintrc.js, .gitignore
        src/index, src/configs, src/framework, src/services,
        src/middlewares, src/modules/example
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from ..config import Config
from ..errors import AlreadyExistsError, FilesystemError, InvalidInputError
from ..models import FileWrite, GenerationResult, ProjectOptions
from ..utils import validate_project_name
from .materializer import copy_tree_async, ensure_dirs_async, flush
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

BASE_DIRECTORIES: list[str] = [
    "src",
    "src/framework",
    "src/modules",
    "src/services",
    "src/middlewares",
    "src/configs",
]

RUNTIME_DEPENDENCIES: dict[str, str] = {
    "express": "^4.18.2",
    "cors": "^2.8.5",
    "helmet": "^7.1.0",
    "zod": "^3.22.4",
}

TYPESCRIPT_DEV_DEPENDENCIES: dict[str, str] = {
    "@types/express": "^4.17.21",
    "@types/cors": "^2.8.17",
    "@types/node": "^20.10.6",
    "ts-node-dev": "^2.0.0",
    "typescript": "^5.3.3",
}

JAVASCRIPT_DEV_DEPENDENCIES: dict[str, str] = {
    "nodemon": "^3.0.2",
}

LINT_DEV_DEPENDENCIES: dict[str, str] = {
    "eslint": "^8.56.0",
    "@typescript-eslint/eslint-plugin": "^6.19.0",
    "@typescript-eslint/parser": "^6.19.0",
}

TSCONFIG: dict[str, Any] = {
    "compilerOptions": {
        "target": "ES2020",
        "module": "commonjs",
        "outDir": "./dist",
        "rootDir": "./src",
        "strict": True,
        "esModuleInterop": True,
        "skipLibCheck": True,
        "forceConsistentCasingInFileNames": True,
        "resolveJsonModule": True,
        "allowSyntheticDefaultImports": True,
    },
    "include": ["src/**/*"],
    "exclude": ["node_modules", "dist"],
}


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Scaffolds a new ExpressOS project.

    Given ``ProjectOptions``, generates a directory tree containing:
    - package manifest with language-specific scripts
    - compiler options (TypeScript only), lint config, README, gitignore
    - framework glue: validated controller factory and route auto-loader
    - application entry point, config module and services registry
    - one worked example module (input, output, use case, routes)
    """

    def __init__(self, options: ProjectOptions, config: Config | None = None) -> None:
        self.options = options
        self.config = config or Config()
        self.renderer = TemplateRenderer(self.config.template_dir)

    # -- Public API --------------------------------------------------------

    async def generate(self, cwd: str | Path) -> GenerationResult:
        """Generate the project inside *cwd*.

        Args:
            cwd: Directory in which the ``<name>/`` project folder is created.

        Returns:
            The project root and every file written, in write order.

        Raises:
            InvalidInputError: If the project name is rejected.
            AlreadyExistsError: If ``cwd / name`` already exists; nothing is
                written in that case.
            FilesystemError: If a write fails. Files written before the
                failure are left in place.
        """
        verdict = validate_project_name(self.options.name)
        if verdict is not True:
            raise InvalidInputError(verdict)

        project_root = Path(cwd).resolve() / self.options.name
        if project_root.exists():
            raise AlreadyExistsError(project_root)

        try:
            await asyncio.to_thread(project_root.mkdir, parents=True)
        except FileExistsError as exc:
            raise AlreadyExistsError(project_root) from exc
        except OSError as exc:
            raise FilesystemError.from_os_error(exc, project_root) from exc

        context = self._build_context()
        result = GenerationResult(root=project_root)

        # 1. Skeleton directories
        await ensure_dirs_async(project_root, BASE_DIRECTORIES)

        # 2. Package manifest and compiler options
        result.files.extend(await flush(self._config_files(project_root, context)))

        # 3. Static files (lint config, gitignore)
        result.files.extend(await copy_tree_async(self.config.static_dir, project_root))

        # 4. README, entry point, framework glue, services, example module
        result.files.extend(await self.renderer.render_tree("project", project_root, context))

        return result

    # -- Context building --------------------------------------------------

    def _build_context(self) -> dict[str, Any]:
        """Build the Jinja2 template context from the project options."""
        typescript = self.options.typescript
        return {
            "project_name": self.options.name,
            "description": self.options.description or self.config.default_description,
            "author": self.options.author or self.config.default_author,
            "typescript": typescript,
            "ext": "ts" if typescript else "js",
        }

    # -- JSON files --------------------------------------------------------

    def _config_files(self, root: Path, ctx: dict[str, Any]) -> list[FileWrite]:
        writes = [FileWrite(root / "package.json", _to_json(package_manifest(ctx)))]
        if ctx["typescript"]:
            writes.append(FileWrite(root / "tsconfig.json", _to_json(TSCONFIG)))
        return writes


def package_manifest(ctx: dict[str, Any]) -> dict[str, Any]:
    """Build the ``package.json`` contents for a project context."""
    typescript = ctx["typescript"]
    if typescript:
        scripts = {
            "build": "tsc",
            "dev": "ts-node-dev --respawn --transpile-only src/index.ts",
            "start": "node dist/index.js",
        }
        dev_dependencies = {**TYPESCRIPT_DEV_DEPENDENCIES, **LINT_DEV_DEPENDENCIES}
    else:
        scripts = {
            "dev": "nodemon src/index.js",
            "start": "node src/index.js",
        }
        dev_dependencies = {**JAVASCRIPT_DEV_DEPENDENCIES, **LINT_DEV_DEPENDENCIES}

    scripts.update({
        "lint": "eslint src/**/*",
        "lint:fix": "eslint src/**/* --fix",
        "test": 'echo "Error: no test specified" && exit 1',
    })

    return {
        "name": ctx["project_name"],
        "version": "1.0.0",
        "description": ctx["description"],
        "main": "dist/index.js" if typescript else "src/index.js",
        "scripts": scripts,
        "keywords": ["express", "api", "clean-architecture"],
        "author": ctx["author"],
        "license": "MIT",
        "dependencies": dict(RUNTIME_DEPENDENCIES),
        "devDependencies": dev_dependencies,
    }


def _to_json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
