"""ExpressOS scaffolder -- generates Express projects and project components.

Quick usage::

    from expressos.models import ProjectOptions
    from expressos.scaffolder import ComponentGenerator, ProjectGenerator

    options = ProjectOptions.build("my-service", typescript=True)
    result = await ProjectGenerator(options).generate(Path.cwd())

    await ComponentGenerator().generate("usecase", "auth login", result.root)
"""

from expressos.scaffolder.components import ComponentGenerator
from expressos.scaffolder.generator import ProjectGenerator
from expressos.scaffolder.registry import ServicesRegistry
from expressos.scaffolder.templates import TemplateRenderer

__all__ = [
    "ComponentGenerator",
    "ProjectGenerator",
    "ServicesRegistry",
    "TemplateRenderer",
]
