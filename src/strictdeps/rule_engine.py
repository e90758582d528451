"""Dependency rule engine: parse module boundary rules and evaluate import events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import yaml

from strictdeps.matching import is_match
from strictdeps.resolver import ImportPathResolver

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from strictdeps.aliases import AliasCache

    Resolver = Callable[[str, "str | None"], str]

MESSAGE_TEMPLATE = "import {import_path} is not allowed from {importer_path}."

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when the rule configuration does not have the expected shape."""


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ModuleRule:
    """A protected module and the importer locations allowed to reference it."""

    module_pattern: str
    allowed_from_patterns: tuple[str, ...] = ()
    allow_same_module: bool = False
    allow_type_import: bool = False


RuleSet = tuple[ModuleRule, ...]


@dataclass(frozen=True)
class GlobalOptions:
    """Options that apply to every rule of a configuration."""

    resolve_relative_import: bool = False
    allow_type_import_globally: bool = False


@dataclass(frozen=True)
class StrictDepsConfig:
    """Rules plus global options, as loaded from one configuration source."""

    rules: RuleSet = ()
    options: GlobalOptions = field(default_factory=GlobalOptions)


@dataclass(frozen=True)
class ImportEvent:
    """One import statement observed in a source file."""

    raw_specifier: str
    importer_path: str  # relative to the project root
    is_type_only: bool = False
    line_number: int | None = None


@dataclass(frozen=True)
class Violation:
    """An import that a matching rule does not allow."""

    import_path: str
    importer_path: str
    module_pattern: str = ""
    line_number: int | None = None

    @property
    def message(self) -> str:
        return MESSAGE_TEMPLATE.format(
            import_path=self.import_path, importer_path=self.importer_path
        )


# ---------------------------------------------------------------------------
# Config parsing
# ---------------------------------------------------------------------------


def _optional_bool(data: dict[str, Any], key: str, context: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        msg = f"{context}: '{key}' must be a boolean"
        raise ConfigError(msg)
    return value


def _parse_module_rule(data: object, idx: int) -> ModuleRule:
    """Parse a single ``{module, allowReferenceFrom, ...}`` mapping."""
    context = f"Rule {idx}"
    if not isinstance(data, dict):
        msg = f"{context}: must be a mapping"
        raise ConfigError(msg)

    module = data.get("module")
    if not isinstance(module, str) or not module:
        msg = f"{context}: 'module' must be a non-empty string"
        raise ConfigError(msg)

    allowed_raw = data.get("allowReferenceFrom", [])
    if not isinstance(allowed_raw, list) or not all(isinstance(p, str) for p in allowed_raw):
        msg = f"{context}: 'allowReferenceFrom' must be a list of strings"
        raise ConfigError(msg)

    return ModuleRule(
        module_pattern=module,
        allowed_from_patterns=tuple(allowed_raw),
        allow_same_module=_optional_bool(data, "allowSameModule", context),
        allow_type_import=_optional_bool(data, "allowTypeImport", context),
    )


def parse_rules(data: object) -> RuleSet:
    """Parse the ``rules`` list into a :data:`RuleSet`, preserving order."""
    if not isinstance(data, list):
        msg = "'rules' must be a list"
        raise ConfigError(msg)
    return tuple(_parse_module_rule(item, idx) for idx, item in enumerate(data))


def parse_options(data: object) -> GlobalOptions:
    """Parse the optional ``options`` mapping."""
    if data is None:
        return GlobalOptions()
    if not isinstance(data, dict):
        msg = "'options' must be a mapping"
        raise ConfigError(msg)
    return GlobalOptions(
        resolve_relative_import=_optional_bool(data, "resolveRelativeImport", "options"),
        allow_type_import_globally=_optional_bool(data, "allowTypeImport", "options"),
    )


def parse_config(data: object) -> StrictDepsConfig:
    """Parse a ``{rules: [...], options: {...}}`` document."""
    if not isinstance(data, dict):
        msg = "configuration must be a mapping"
        raise ConfigError(msg)
    return StrictDepsConfig(
        rules=parse_rules(data.get("rules", [])),
        options=parse_options(data.get("options")),
    )


def parse_host_options(options: Sequence[object]) -> StrictDepsConfig:
    """Parse linter-style positional options: ``[rules]`` or ``[rules, options]``."""
    if not options:
        msg = "expected at least one option (the rules list)"
        raise ConfigError(msg)
    extra = options[1] if len(options) > 1 else None
    return StrictDepsConfig(rules=parse_rules(options[0]), options=parse_options(extra))


def load_config(config_path: Path) -> StrictDepsConfig:
    """Read a YAML (or JSON) configuration file.

    Raises :class:`ConfigError` on unreadable files, syntax errors, or a
    document of the wrong shape.
    """
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as exc:
        msg = f"cannot read {config_path}: {exc}"
        raise ConfigError(msg) from exc
    except yaml.YAMLError as exc:
        msg = f"invalid YAML in {config_path}: {exc}"
        raise ConfigError(msg) from exc

    return parse_config(data if data is not None else {})


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def is_import_allowed(rule: ModuleRule, importer_path: str, *, is_type_only: bool) -> bool:
    """Return True if *rule* lets *importer_path* reference its module."""
    if any(is_match(importer_path, pattern) for pattern in rule.allowed_from_patterns):
        return True
    if rule.allow_same_module and is_match(importer_path, rule.module_pattern):
        return True
    return rule.allow_type_import and is_type_only


def evaluate_import(
    event: ImportEvent,
    rules: Sequence[ModuleRule],
    options: GlobalOptions,
    *,
    resolver: Resolver,
) -> list[Violation]:
    """Evaluate one import event against every rule.

    Type-only imports return early, before *resolver* is called, when
    ``options.allow_type_import_globally`` is set.  Otherwise each rule whose
    module pattern matches the resolved path is checked on its own and may
    contribute one violation.
    """
    if options.allow_type_import_globally and event.is_type_only:
        return []

    importer_path = event.importer_path
    import_path = resolver(
        event.raw_specifier,
        importer_path if options.resolve_relative_import else None,
    )

    violations: list[Violation] = []
    for rule in rules:
        if not is_match(import_path, rule.module_pattern):
            continue
        if is_import_allowed(rule, importer_path, is_type_only=event.is_type_only):
            continue
        violations.append(
            Violation(
                import_path=import_path,
                importer_path=importer_path,
                module_pattern=rule.module_pattern,
                line_number=event.line_number,
            )
        )
    return violations


class DependencyRuleEngine:
    """Rule set, options and resolver bound to one project root.

    Holds no mutable state between :meth:`evaluate` calls.
    """

    def __init__(
        self,
        project_root: Path,
        config: StrictDepsConfig,
        *,
        alias_cache: AliasCache | None = None,
    ) -> None:
        self.project_root = project_root
        self.config = config
        self.resolver = ImportPathResolver(project_root, cache=alias_cache)

    @property
    def rules(self) -> RuleSet:
        return self.config.rules

    def evaluate(self, event: ImportEvent) -> list[Violation]:
        return evaluate_import(
            event, self.config.rules, self.config.options, resolver=self.resolver.resolve
        )
