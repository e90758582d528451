"""Linter orchestrator: load config, scan sources, evaluate imports, format results."""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from strictdeps.aliases import AliasCache
from strictdeps.import_extractor import extract_import_events, supported_extensions
from strictdeps.rule_engine import ConfigError, DependencyRuleEngine, Violation, load_config

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "strictdeps.yml"

_SKIP_DIRS: frozenset[str] = frozenset(
    {"node_modules", "dist", "build", "coverage", "out", "__pycache__"}
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class LintError(Exception):
    """Raised when lint encounters a configuration error."""


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class LintResult:
    """Result of a lint run."""

    violations: list[Violation] = field(default_factory=list)
    rules_evaluated: int = 0
    files_scanned: int = 0
    imports_checked: int = 0
    elapsed_ms: float = 0.0


# ---------------------------------------------------------------------------
# File discovery
# ---------------------------------------------------------------------------


def _walk_dir(root: Path, exts: frozenset[str]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        # Pruned in place: os.walk does not descend into removed entries.
        dirnames[:] = sorted(
            d for d in dirnames if d not in _SKIP_DIRS and not d.startswith(".")
        )
        base = Path(dirpath)
        for name in sorted(filenames):
            file_path = base / name
            if file_path.suffix in exts:
                yield file_path


def iter_source_files(project_root: Path, paths: Iterable[Path] | None = None) -> Iterator[Path]:
    """Yield supported source files under *paths* (default: the whole project).

    Relative *paths* are taken against *project_root*.  Files given explicitly
    are taken as-is; directories are walked recursively, skipping dependency,
    build and hidden directories.  Each file is yielded once, even when the
    given paths overlap.
    """
    exts = supported_extensions()
    roots = list(paths) if paths else [project_root]
    seen: set[Path] = set()

    def _once(candidates: Iterable[Path]) -> Iterator[Path]:
        for candidate in candidates:
            key = candidate.resolve()
            if key in seen:
                continue
            seen.add(key)
            yield candidate

    for root in roots:
        root = root if root.is_absolute() else project_root / root
        if root.is_file():
            if root.suffix in exts:
                yield from _once([root])
            continue
        if not root.is_dir():
            logger.warning("Skipping missing path: %s", root)
            continue
        yield from _once(_walk_dir(root, exts))


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def lint(
    project_root: Path,
    *,
    config_path: Path | None = None,
    paths: Iterable[Path] | None = None,
) -> LintResult:
    """Check every import under *project_root* against the configured rules.

    Parameters
    ----------
    project_root:
        Root the importer paths and ``tsconfig.json`` are resolved against.
    config_path:
        Optional explicit rule configuration.  When *None* the default
        ``<project_root>/strictdeps.yml`` is used.
    paths:
        Optional files or directories to restrict the scan to.

    Returns
    -------
    LintResult
        Summary with violations, counts, and timing.

    Raises
    ------
    LintError
        When the configuration file is present but invalid.
    """
    start = time.monotonic()
    project_root = project_root.resolve()

    if config_path is None:
        config_path = project_root / DEFAULT_CONFIG_FILENAME

    # No config file means there is nothing to enforce.
    if not config_path.is_file():
        logger.info("No configuration at %s; nothing to check", config_path)
        return LintResult(elapsed_ms=(time.monotonic() - start) * 1000)

    try:
        config = load_config(config_path)
    except ConfigError as exc:
        msg = f"Invalid rules configuration: {exc}"
        raise LintError(msg) from exc

    # tsconfig.json cannot change mid-run, so one cache serves the whole scan.
    engine = DependencyRuleEngine(project_root, config, alias_cache=AliasCache())

    violations: list[Violation] = []
    files_scanned = 0
    imports_checked = 0
    for file_path in iter_source_files(project_root, paths):
        files_scanned += 1
        for event in extract_import_events(file_path, project_root):
            imports_checked += 1
            violations.extend(engine.evaluate(event))

    elapsed = (time.monotonic() - start) * 1000
    logger.info(
        "Checked %d imports in %d files: %d violations",
        imports_checked,
        files_scanned,
        len(violations),
    )

    return LintResult(
        violations=violations,
        rules_evaluated=len(config.rules),
        files_scanned=files_scanned,
        imports_checked=imports_checked,
        elapsed_ms=elapsed,
    )


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def _location(v: Violation) -> str:
    if v.line_number is None:
        return v.importer_path
    return f"{v.importer_path}:{v.line_number}"


def format_rich(result: LintResult) -> str:
    """Format a LintResult as human-readable text.

    Example output with violations::

        Rules: 2 loaded
        Files: 25 scanned, 142 imports checked

        ✗ src/components/test/aaa.ts:3
          import src/components/ui/Text is not allowed from src/components/test/aaa.ts.
          (module: src/components/ui)

        1 violations found (2 rules evaluated, 0.1s)
    """
    lines: list[str] = []

    lines.append(f"Rules: {result.rules_evaluated} loaded")
    lines.append(f"Files: {result.files_scanned} scanned, {result.imports_checked} imports checked")
    lines.append("")

    elapsed_str = f"{result.elapsed_ms / 1000:.1f}s"

    if result.violations:
        for v in result.violations:
            lines.append(f"✗ {_location(v)}")
            lines.append(f"  {v.message}")
            lines.append(f"  (module: {v.module_pattern})")
            lines.append("")

        count = len(result.violations)
        lines.append(
            f"{count} violations found ({result.rules_evaluated} rules evaluated, {elapsed_str})"
        )
    else:
        lines.append(
            f"✓ No violations found ({result.rules_evaluated} rules evaluated, {elapsed_str})"
        )

    return "\n".join(lines)


def format_json(result: LintResult) -> str:
    """Format a LintResult as structured JSON with ``violations`` and ``summary``."""
    violations_list: list[dict[str, object]] = [
        {
            "importPath": v.import_path,
            "importerPath": v.importer_path,
            "module": v.module_pattern,
            "line": v.line_number,
            "message": v.message,
        }
        for v in result.violations
    ]

    output: dict[str, object] = {
        "violations": violations_list,
        "summary": {
            "rules_evaluated": result.rules_evaluated,
            "violations_count": len(result.violations),
            "files_scanned": result.files_scanned,
            "imports_checked": result.imports_checked,
            "elapsed_ms": result.elapsed_ms,
        },
    }

    return json.dumps(output, indent=2)


def format_porcelain(result: LintResult) -> str:
    """One line per violation: ``importer_path:line:import_path:module``.

    Returns an empty string when there are no violations.
    """
    lines: list[str] = []
    for v in result.violations:
        line = str(v.line_number) if v.line_number is not None else ""
        lines.append(f"{v.importer_path}:{line}:{v.import_path}:{v.module_pattern}")
    return "\n".join(lines)
