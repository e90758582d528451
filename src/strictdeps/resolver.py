"""Import path resolver: turn a raw import specifier into a project-rooted path."""

from __future__ import annotations

import posixpath
from functools import reduce
from typing import TYPE_CHECKING

from strictdeps.aliases import AliasCache, PathAliasMap, load_path_aliases

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

_RELATIVE_PREFIXES: tuple[str, ...] = ("./", "../")


def resolve_relative(specifier: str, importer_path: str) -> str:
    """Join a ``./`` or ``../`` specifier onto the importer's directory.

    ``("../../components/ui/Text", "src/pages/aaa/bbb.ts")`` gives
    ``"src/components/ui/Text"``.
    """
    joined = posixpath.normpath(posixpath.join(posixpath.dirname(importer_path), specifier))
    if specifier.endswith("/") and not joined.endswith("/"):
        joined += "/"
    return joined


def apply_aliases(import_path: str, alias_map: PathAliasMap) -> str:
    """Substitute every alias of *alias_map* into *import_path*, in order.

    Each entry replaces the first literal occurrence of its pattern (first
    ``*`` removed) in the output of the previous entry, so substitutions
    accumulate across the whole alias list.
    """

    def _substitute(current: str, alias: tuple[str, str]) -> str:
        pattern, target = alias
        return current.replace(pattern.replace("*", "", 1), target.replace("*", "", 1), 1)

    return reduce(_substitute, alias_map.aliases, import_path)


def resolve_import_path(
    raw_specifier: str,
    importer_path: str | None = None,
    *,
    project_root: Path,
    alias_loader: Callable[[Path], PathAliasMap] = load_path_aliases,
) -> str:
    """Return the canonical project-rooted path for *raw_specifier*.

    Relative specifiers are joined onto *importer_path* only when it is
    given; otherwise they pass through unchanged.  Path aliases from
    tsconfig.json are applied afterwards.  Never raises.
    """
    alias_map = alias_loader(project_root)

    import_path = raw_specifier
    if importer_path and raw_specifier.startswith(_RELATIVE_PREFIXES):
        import_path = resolve_relative(raw_specifier, importer_path)

    return apply_aliases(import_path, alias_map)


class ImportPathResolver:
    """Resolver bound to one project root for the duration of an analysis run.

    Without an :class:`AliasCache` the alias configuration is re-read on every
    call.
    """

    def __init__(self, project_root: Path, *, cache: AliasCache | None = None) -> None:
        self.project_root = project_root
        self._cache = cache

    def _load_aliases(self, project_root: Path) -> PathAliasMap:
        if self._cache is not None:
            return self._cache.get(project_root)
        return load_path_aliases(project_root)

    def resolve(self, raw_specifier: str, importer_path: str | None = None) -> str:
        return resolve_import_path(
            raw_specifier,
            importer_path,
            project_root=self.project_root,
            alias_loader=self._load_aliases,
        )

    __call__ = resolve
