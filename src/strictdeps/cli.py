"""strictdeps CLI entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from strictdeps import __version__


@click.group()
@click.version_option(version=__version__, prog_name="strictdeps")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """strictdeps - enforce module boundaries between import statements."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


_project_option = click.option(
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: current directory).",
)

_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Rule configuration file (default: <project>/strictdeps.yml).",
)


@main.command()
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "json", "porcelain"]),
    default=None,
    help="Output format (default: rich if TTY, porcelain if piped).",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit 1 if violations found.",
)
@_project_option
@_config_option
def lint(
    *,
    paths: tuple[Path, ...],
    fmt: str | None,
    strict: bool,
    project: Path | None,
    config_path: Path | None,
) -> None:
    """Check imports against the module boundary rules.

    Exit codes: 0 = clean or violations without --strict,
    1 = violations with --strict, 2 = configuration error.
    """
    from strictdeps.linter import LintError, format_json, format_porcelain, format_rich
    from strictdeps.linter import lint as run_lint

    project_root = project or Path.cwd()
    # PATHS were checked against the working directory, not the project root.
    scan_paths = tuple(p.resolve() for p in paths) or None

    # Resolve output format: explicit flag > TTY detection.
    if fmt is None:
        fmt = "rich" if sys.stdout.isatty() else "porcelain"

    try:
        result = run_lint(project_root, config_path=config_path, paths=scan_paths)
    except LintError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    formatters = {
        "rich": format_rich,
        "json": format_json,
        "porcelain": format_porcelain,
    }
    output = formatters[fmt](result)
    if output:
        click.echo(output)

    if strict and result.violations:
        sys.exit(1)


@main.command()
@click.argument("specifier")
@click.option(
    "--from",
    "importer",
    default=None,
    help="Importing file, relative to the project root (enables ./ and ../ resolution).",
)
@_project_option
def resolve(*, specifier: str, importer: str | None, project: Path | None) -> None:
    """Print the canonical project path for an import SPECIFIER."""
    from strictdeps.resolver import ImportPathResolver

    resolver = ImportPathResolver(project or Path.cwd())
    click.echo(resolver.resolve(specifier, importer))


@main.command()
@_project_option
@_config_option
def rules(*, project: Path | None, config_path: Path | None) -> None:
    """Show the configured module boundary rules."""
    from rich.console import Console
    from rich.table import Table

    from strictdeps.linter import DEFAULT_CONFIG_FILENAME
    from strictdeps.rule_engine import ConfigError, load_config

    project_root = project or Path.cwd()
    path = config_path or project_root / DEFAULT_CONFIG_FILENAME
    if not path.is_file():
        click.echo(f"Error: configuration not found: {path}", err=True)
        sys.exit(2)

    try:
        config = load_config(path)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    table = Table(title=f"Module rules ({path.name})")
    table.add_column("Module", style="cyan")
    table.add_column("Allowed from")
    table.add_column("Same module", justify="center")
    table.add_column("Type import", justify="center")

    for rule in config.rules:
        table.add_row(
            rule.module_pattern,
            "\n".join(rule.allowed_from_patterns) or "-",
            "yes" if rule.allow_same_module else "no",
            "yes" if rule.allow_type_import else "no",
        )

    console = Console()
    console.print(table)

    opts = config.options
    console.print(
        f"resolveRelativeImport: {'on' if opts.resolve_relative_import else 'off'}, "
        f"allowTypeImport: {'on' if opts.allow_type_import_globally else 'off'}"
    )
