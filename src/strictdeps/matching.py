"""Path pattern matching shared by module and importer-location checks.

A pattern is either a glob (``src/**/*.ts``, ``src/{ui,pages}/*``) or a
plain prefix (``src/components``).  Globs use the ``fnmatch`` dialect, so a
single ``*`` also crosses ``/``.  Two extensions are layered on top:

- ``{a,b}`` brace alternatives are expanded before matching;
- ``**/`` may also match zero directories.

Prefix patterns are compared with :meth:`str.startswith`; no path-segment
boundary is enforced, so ``src/componentsX`` matches ``src/components``.
"""

from __future__ import annotations

import fnmatch
import re
from functools import lru_cache

_GLOB_CHARS_RE = re.compile(r"(?<!\\)[*?\[\]{}]")
_GLOBSTAR_DIR = "**/"


def is_glob(pattern: str) -> bool:
    """Return True if *pattern* contains an unescaped glob metacharacter."""
    return _GLOB_CHARS_RE.search(pattern) is not None


def _find_brace_group(pattern: str) -> tuple[int, int, list[str]] | None:
    """Locate the first ``{...}`` group that contains a top-level comma.

    Returns ``(start, end, alternatives)`` where ``pattern[start:end]`` is the
    whole group including braces, or ``None`` when there is nothing to expand.
    """
    start = pattern.find("{")
    while start != -1:
        depth = 0
        commas: list[int] = []
        for idx in range(start, len(pattern)):
            char = pattern[idx]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    if commas:
                        bounds = [start, *commas, idx]
                        alternatives = [
                            pattern[bounds[i] + 1 : bounds[i + 1]] for i in range(len(bounds) - 1)
                        ]
                        return start, idx + 1, alternatives
                    break
            elif char == "," and depth == 1:
                commas.append(idx)
        start = pattern.find("{", start + 1)
    return None


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives, including nested groups.

    E.g. ``src/{ui,pages}/*.ts`` expands to ``src/ui/*.ts`` and ``src/pages/*.ts``.
    """
    group = _find_brace_group(pattern)
    if group is None:
        return [pattern]

    start, end, alternatives = group
    expanded: list[str] = []
    for alternative in alternatives:
        expanded.extend(expand_braces(pattern[:start] + alternative + pattern[end:]))
    return expanded


def _globstar_variants(pattern: str) -> list[str]:
    """Return *pattern* plus every variant with some ``**/`` segments dropped."""
    parts = pattern.split(_GLOBSTAR_DIR)
    variants = [parts[0]]
    for part in parts[1:]:
        variants = [v + sep + part for v in variants for sep in (_GLOBSTAR_DIR, "")]
    return variants


@lru_cache(maxsize=512)
def _compile_glob(pattern: str) -> tuple[str, ...]:
    variants: list[str] = []
    for alternative in expand_braces(pattern):
        for variant in _globstar_variants(alternative):
            if variant not in variants:
                variants.append(variant)
    return tuple(variants)


def glob_match(candidate: str, pattern: str) -> bool:
    """Full glob match of *candidate* against *pattern* (case-sensitive)."""
    return any(fnmatch.fnmatchcase(candidate, variant) for variant in _compile_glob(pattern))


def is_match(candidate: str, pattern: str) -> bool:
    """Glob match when *pattern* is a glob, otherwise a plain prefix match."""
    if is_glob(pattern):
        return glob_match(candidate, pattern)
    return candidate.startswith(pattern)
