"""ExpressOS configuration.

Typed settings for the scaffolder and the component generators. The
defaults describe the layout every scaffolded project follows; the template
locations can be overridden to scaffold from a customised template set.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

_PACKAGE_DIR = Path(__file__).parent


class Config(BaseModel):
    """Global ExpressOS configuration.

    Instances are created once by the CLI entry point and passed to
    ``ProjectGenerator`` and ``ComponentGenerator``.  Nothing in here refers to
    the process working directory; callers pass it explicitly.
    """

    template_dir: Path = Field(default=_PACKAGE_DIR / "scaffolder" / "templates")
    static_dir: Path = Field(
        default=_PACKAGE_DIR / "scaffolder" / "static",
        description="Files mirrored byte-for-byte into every new project",
    )
    usecase_path: str = Field(default="src/modules", description="Default use case location")
    services_path: str = Field(default="src/services")
    middlewares_path: str = Field(default="src/middlewares")
    default_description: str = Field(default="An Express service with clean architecture")
    default_author: str = Field(default="ExpressOS Team")
    project_markers: list[str] = Field(
        default=["src", "src/framework", "src/modules"],
        description="Directories that identify a scaffolded project",
    )

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def registry_file(self, project_root: Path, typescript: bool) -> Path:
        """Path to the services registry inside *project_root*."""
        ext = "ts" if typescript else "js"
        return project_root / self.services_path / f"services.{ext}"

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            EXPRESSOS_TEMPLATE_DIR, EXPRESSOS_STATIC_DIR,
            EXPRESSOS_USECASE_PATH, EXPRESSOS_DEFAULT_AUTHOR,
            EXPRESSOS_DEFAULT_DESCRIPTION.
        """
        kwargs: dict[str, object] = {}
        if os.environ.get("EXPRESSOS_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["EXPRESSOS_TEMPLATE_DIR"])
        if os.environ.get("EXPRESSOS_STATIC_DIR"):
            kwargs["static_dir"] = Path(os.environ["EXPRESSOS_STATIC_DIR"])
        if os.environ.get("EXPRESSOS_USECASE_PATH"):
            kwargs["usecase_path"] = os.environ["EXPRESSOS_USECASE_PATH"]
        if os.environ.get("EXPRESSOS_DEFAULT_AUTHOR"):
            kwargs["default_author"] = os.environ["EXPRESSOS_DEFAULT_AUTHOR"]
        if os.environ.get("EXPRESSOS_DEFAULT_DESCRIPTION"):
            kwargs["default_description"] = os.environ["EXPRESSOS_DEFAULT_DESCRIPTION"]
        return cls(**kwargs)
