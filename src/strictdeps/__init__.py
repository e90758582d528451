"""strictdeps: module boundary checks for alias-aware import paths."""

__version__ = "0.3.0"

from strictdeps.aliases import (  # noqa: E402
    AliasCache,
    PathAliasMap,
    load_path_aliases,
    read_alias_config,
)
from strictdeps.matching import is_glob, is_match  # noqa: E402
from strictdeps.resolver import ImportPathResolver, resolve_import_path  # noqa: E402
from strictdeps.rule_engine import (  # noqa: E402
    ConfigError,
    DependencyRuleEngine,
    GlobalOptions,
    ImportEvent,
    ModuleRule,
    StrictDepsConfig,
    Violation,
    evaluate_import,
    load_config,
    parse_config,
    parse_host_options,
)

__all__ = [
    "AliasCache",
    "ConfigError",
    "DependencyRuleEngine",
    "GlobalOptions",
    "ImportEvent",
    "ImportPathResolver",
    "ModuleRule",
    "PathAliasMap",
    "StrictDepsConfig",
    "Violation",
    "__version__",
    "evaluate_import",
    "is_glob",
    "is_match",
    "load_config",
    "load_path_aliases",
    "parse_config",
    "parse_host_options",
    "read_alias_config",
    "resolve_import_path",
]
