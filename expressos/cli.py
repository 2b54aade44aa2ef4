"""ExpressOS command-line interface.

Usage::

    expressos create my-service --typescript
    expressos create                      # interactive
    expressos usecase auth login --path src/modules
    expressos service user-profile
    expressos middleware rate-limit
    expressos generate usecase "auth login"
    expressos g service billing
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.prompt import Confirm, Prompt

from expressos import __version__
from expressos.config import Config
from expressos.errors import ExpressOSError
from expressos.models import ComponentKind, GenerationResult, ProjectOptions
from expressos.scaffolder import ComponentGenerator, ProjectGenerator
from expressos.utils import (
    console,
    print_error,
    print_file_list,
    print_success,
    print_warning,
    to_camel_case,
    validate_project_name,
)

DEFAULT_PROJECT_NAME = "expresso-app"


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the ``expressos`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="expressos",
        description="ExpressOS -- scaffold Express services with clean architecture",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  expressos create my-service\n"
            "  expressos usecase auth login\n"
            "  expressos service user-profile\n"
            "  expressos g middleware rate-limit\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", metavar="<command>")

    create = sub.add_parser("create", help="Create a new project")
    create.add_argument("name", nargs="?", help="Project name (prompted for when omitted)")
    create.add_argument(
        "--typescript",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Generate TypeScript sources (default) or plain JavaScript",
    )
    create.add_argument("--description", default=None, help="package.json description")
    create.add_argument("--author", default=None, help="package.json author")
    create.add_argument(
        "-i", "--interactive",
        action="store_true",
        help="Prompt for every option even when a name is given",
    )

    usecase = sub.add_parser("usecase", help="Generate a use case")
    usecase.add_argument("domain", help="Use case name, or its domain when ACTION is given")
    usecase.add_argument("action", nargs="?", help="Action inside DOMAIN")
    usecase.add_argument("--path", default=None, help="Target directory (default: src/modules)")

    service = sub.add_parser("service", help="Generate a service in src/services")
    service.add_argument("name", nargs="+", help="Service name")

    middleware = sub.add_parser("middleware", help="Generate a middleware in src/middlewares")
    middleware.add_argument("name", nargs="+", help="Middleware name")

    generate = sub.add_parser("generate", aliases=["g"], help="Generate any component")
    generate.add_argument(
        "type", help="Component type: usecase, service, middleware or module"
    )
    generate.add_argument("name", nargs="+", help='Component name ("name" or "domain action")')
    generate.add_argument("--path", default=None, help="Target directory for use cases/modules")

    return parser


# ---------------------------------------------------------------------------
# Interactive prompt
# ---------------------------------------------------------------------------


def prompt_project_options(args: argparse.Namespace, config: Config) -> ProjectOptions:
    """Ask for the project options, using CLI values as defaults."""
    name = args.name or DEFAULT_PROJECT_NAME
    while True:
        name = Prompt.ask("Project name", default=name, console=console)
        verdict = validate_project_name(name)
        if verdict is True:
            break
        print_error(verdict)

    description = Prompt.ask(
        "Description",
        default=args.description or config.default_description,
        console=console,
    )
    author = Prompt.ask("Author", default=args.author or config.default_author, console=console)
    typescript = Confirm.ask(
        "Use TypeScript?",
        default=True if args.typescript is None else args.typescript,
        console=console,
    )
    return ProjectOptions.build(name, description, author, typescript)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


async def _create(args: argparse.Namespace, cwd: Path, config: Config) -> None:
    if args.interactive or not args.name:
        options = prompt_project_options(args, config)
    else:
        options = ProjectOptions.build(
            args.name,
            args.description,
            args.author,
            True if args.typescript is None else args.typescript,
        )

    console.print(f"Creating project [bold]{options.name}[/bold]...")
    result = await ProjectGenerator(options, config).generate(cwd)

    print_success(f"Project '{options.name}' created successfully!")
    print_file_list(result.files, result.root)
    console.print(f"[blue]Next: cd {options.name}[/blue]")
    console.print("[yellow]Install dependencies: npm install[/yellow]")
    console.print("[magenta]Start the dev server: npm run dev[/magenta]")


async def _generate(
    kind: ComponentKind | str,
    raw_name: str,
    cwd: Path,
    config: Config,
    target_path: str | None = None,
) -> None:
    # The project check runs before the type string is parsed.
    result = await ComponentGenerator(config).generate(kind, raw_name, cwd, target_path)
    if not isinstance(kind, ComponentKind):
        kind = ComponentKind.parse(kind)
    _report_component(kind, raw_name, result, cwd)


def _report_component(
    kind: ComponentKind, raw_name: str, result: GenerationResult, cwd: Path
) -> None:
    label = {
        ComponentKind.USECASE: "Use case",
        ComponentKind.MODULE: "Module",
        ComponentKind.SERVICE: "Service",
        ComponentKind.MIDDLEWARE: "Middleware",
    }[kind]
    shown_root = result.root.relative_to(cwd) if result.root.is_relative_to(cwd) else result.root
    print_success(f"{label} '{raw_name}' created in {shown_root.as_posix()}")
    print_file_list(result.files, cwd)

    for warning in result.warnings:
        print_warning(warning)

    if kind is ComponentKind.SERVICE and result.registry_updated:
        console.print("[yellow]Service added to the services container[/yellow]")
    elif kind is ComponentKind.MIDDLEWARE:
        name = to_camel_case(raw_name)
        console.print(f"[yellow]Use it in src/index: app.use({name}({{ enabled: true }}));[/yellow]")
    elif kind in (ComponentKind.USECASE, ComponentKind.MODULE):
        console.print("[yellow]Restart your server to load the new routes[/yellow]")


async def _dispatch(args: argparse.Namespace, cwd: Path, config: Config) -> None:
    command = args.command
    if command == "create":
        await _create(args, cwd, config)
    elif command == "usecase":
        raw_name = args.domain if not args.action else f"{args.domain} {args.action}"
        await _generate(ComponentKind.USECASE, raw_name, cwd, config, args.path)
    elif command == "service":
        await _generate(ComponentKind.SERVICE, " ".join(args.name), cwd, config)
    elif command == "middleware":
        await _generate(ComponentKind.MIDDLEWARE, " ".join(args.name), cwd, config)
    elif command in ("generate", "g"):
        await _generate(args.type, " ".join(args.name), cwd, config, args.path)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(
    argv: list[str] | None = None,
    cwd: str | Path | None = None,
    config: Config | None = None,
) -> int:
    """Run one ``expressos`` command and return its exit code.

    Args:
        argv: Arguments without the program name; ``sys.argv[1:]`` when omitted.
        cwd: Base directory for every relative path; the process working
            directory when omitted.
        config: Settings; read from the environment when omitted.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    base = (Path(cwd) if cwd is not None else Path.cwd()).resolve()
    settings = config or Config.from_env()

    try:
        asyncio.run(_dispatch(args, base, settings))
    except ExpressOSError as exc:
        print_error(str(exc))
        return exc.exit_code
    except KeyboardInterrupt:
        print_error("Aborted")
        return 1
    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        return 1
    return 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
