"""Import extractor: parse TypeScript/JavaScript with tree-sitter and emit ImportEvents."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tree_sitter import Language, Parser

from strictdeps.rule_engine import ImportEvent

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from tree_sitter import Node as TSNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LangConfig:
    """Tree-sitter grammar for one family of source files."""

    name: str
    language: Language


# ---- Language loaders (lazy) ----


def _load_typescript() -> LangConfig:
    import tree_sitter_typescript as tstypescript

    return LangConfig(name="typescript", language=Language(tstypescript.language_typescript()))


def _load_tsx() -> LangConfig:
    import tree_sitter_typescript as tstypescript

    return LangConfig(name="tsx", language=Language(tstypescript.language_tsx()))


# Extension -> loader function mapping.
_EXTENSION_LOADERS: dict[str, Callable[[], LangConfig]] = {
    ".ts": _load_typescript,
    ".mts": _load_typescript,
    ".cts": _load_typescript,
    ".js": _load_tsx,
    ".mjs": _load_tsx,
    ".cjs": _load_tsx,
    ".tsx": _load_tsx,
    ".jsx": _load_tsx,
}

_LANG_CACHE: dict[str, LangConfig] = {}


def supported_extensions() -> frozenset[str]:
    """Return the file extensions the extractor understands."""
    return frozenset(_EXTENSION_LOADERS)


def get_lang_config(extension: str) -> LangConfig | None:
    """Get the grammar for a file extension, or ``None`` if unsupported."""
    if extension in _LANG_CACHE:
        return _LANG_CACHE[extension]

    loader = _EXTENSION_LOADERS.get(extension)
    if loader is None:
        return None

    config = loader()
    _LANG_CACHE[extension] = config
    return config


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def _get_import_source(node: TSNode) -> str | None:
    """Extract the string value from an import statement's ``from`` clause."""
    for child in node.children:
        if child.type == "string":
            # The string node contains quote chars and a string_fragment
            for sub in child.children:
                if sub.type == "string_fragment":
                    return sub.text.decode("utf-8") if sub.text else None
    return None


def _is_type_only(node: TSNode) -> bool:
    """True for ``import type ... from``.

    Inline specifiers (``import { type A } from``) leave the statement a
    value import.
    """
    return any(child.type == "type" for child in node.children)


def extract_events_from_source(
    source: bytes, importer_path: str, extension: str
) -> list[ImportEvent]:
    """Parse *source* and return one ImportEvent per top-level import statement."""
    config = get_lang_config(extension)
    if config is None:
        return []

    parser = Parser(config.language)
    tree = parser.parse(source)

    events: list[ImportEvent] = []
    for child in tree.root_node.children:
        if child.type != "import_statement":
            continue

        specifier = _get_import_source(child)
        if specifier is None:
            continue

        events.append(
            ImportEvent(
                raw_specifier=specifier,
                importer_path=importer_path,
                is_type_only=_is_type_only(child),
                line_number=child.start_point.row + 1,
            )
        )
    return events


def extract_import_events(file_path: Path, project_root: Path) -> list[ImportEvent]:
    """Extract import events from a source file under *project_root*.

    The importer path on each event is relative to *project_root* in posix
    form.  Unsupported extensions, unreadable files and empty files yield
    an empty list.
    """
    if get_lang_config(file_path.suffix) is None:
        return []

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.debug("Cannot read source file: %s", file_path)
        return []

    if not content.strip():
        return []

    try:
        importer_path = file_path.relative_to(project_root).as_posix()
    except ValueError:
        importer_path = file_path.as_posix()

    return extract_events_from_source(content.encode("utf-8"), importer_path, file_path.suffix)
