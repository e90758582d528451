"""Path alias store: read ``compilerOptions.paths`` from the project's tsconfig.json."""

from __future__ import annotations

import json
import logging
import posixpath
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

ALIAS_CONFIG_FILENAME = "tsconfig.json"


@dataclass(frozen=True)
class PathAliasMap:
    """Alias patterns mapped to project-relative target prefixes.

    ``aliases`` keeps the key order of ``compilerOptions.paths``; the
    resolver applies the entries in exactly this order.
    """

    base_path: str | None = None
    aliases: tuple[tuple[str, str], ...] = ()


EMPTY_ALIAS_MAP = PathAliasMap()


@dataclass(frozen=True)
class AliasConfigResult:
    """Outcome of reading the alias configuration file."""

    alias_map: PathAliasMap
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def join_alias_target(base_path: str, target: str) -> str:
    """Join *target* onto *base_path* and normalize the result.

    A trailing ``/`` on *target* survives normalization, so ``("src", "components/")``
    gives ``"src/components/"``.  A leading ``/`` on *target* does not reset
    the join.
    """
    joined = posixpath.normpath(f"{base_path}/{target}")
    if target.endswith("/") and not joined.endswith("/"):
        joined += "/"
    return joined


def _failure(message: str) -> AliasConfigResult:
    return AliasConfigResult(alias_map=EMPTY_ALIAS_MAP, error=message)


def _parse_compiler_options(data: Any) -> AliasConfigResult:
    """Build a PathAliasMap from a decoded tsconfig document."""
    if not isinstance(data, dict):
        return _failure("top-level value is not an object")

    compiler_options = data.get("compilerOptions")
    if not isinstance(compiler_options, dict):
        return _failure("missing compilerOptions")

    base_url = compiler_options.get("baseUrl")
    if base_url is not None and not isinstance(base_url, str):
        return _failure("compilerOptions.baseUrl must be a string")

    paths = compiler_options.get("paths")
    if paths is None:
        return AliasConfigResult(alias_map=PathAliasMap(base_path=base_url or None))
    if not isinstance(paths, dict):
        return _failure("compilerOptions.paths must be an object")

    aliases: list[tuple[str, str]] = []
    for alias, targets in paths.items():
        # Existence of the alternatives is never checked, so only the first target counts.
        if not isinstance(targets, list) or not targets or not isinstance(targets[0], str):
            return _failure(f"compilerOptions.paths[{alias!r}] must be a non-empty list of strings")
        target: str = targets[0]
        if base_url:
            target = join_alias_target(base_url, target)
        aliases.append((str(alias), target))

    return AliasConfigResult(
        alias_map=PathAliasMap(base_path=base_url or None, aliases=tuple(aliases))
    )


def read_alias_config(project_root: Path) -> AliasConfigResult:
    """Read ``<project_root>/tsconfig.json`` into an :class:`AliasConfigResult`.

    Never raises: a missing, unreadable or malformed file produces a result
    carrying the empty map and an ``error`` description.
    """
    path = project_root / ALIAS_CONFIG_FILENAME
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return _failure(f"cannot read {path}: {exc}")

    try:
        data = json.loads(content)
    except (json.JSONDecodeError, ValueError) as exc:
        return _failure(f"invalid JSON in {path}: {exc}")

    return _parse_compiler_options(data)


def load_path_aliases(project_root: Path) -> PathAliasMap:
    """Return the alias map for *project_root*, or an empty map on any failure."""
    result = read_alias_config(project_root)
    if not result.ok:
        logger.debug("No path aliases loaded: %s", result.error)
    return result.alias_map


class AliasCache:
    """Memoize :func:`load_path_aliases` per project root.

    An entry is reused only while the config file's ``(mtime_ns, size)``
    signature is unchanged, so edits to tsconfig.json are picked up on the
    next lookup.  A missing file has the signature ``None``.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[tuple[int, int] | None, PathAliasMap]] = {}

    @staticmethod
    def _signature(project_root: Path) -> tuple[int, int] | None:
        try:
            stat = (project_root / ALIAS_CONFIG_FILENAME).stat()
        except OSError:
            return None
        return (stat.st_mtime_ns, stat.st_size)

    def get(self, project_root: Path) -> PathAliasMap:
        key = str(project_root.resolve())
        signature = self._signature(project_root)
        cached = self._entries.get(key)
        if cached is not None and cached[0] == signature:
            return cached[1]

        alias_map = load_path_aliases(project_root)
        self._entries[key] = (signature, alias_map)
        return alias_map

    def clear(self) -> None:
        self._entries.clear()
