"""Tests for the import path resolver: relative joining and alias substitution."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from strictdeps.aliases import AliasCache, PathAliasMap
from strictdeps.resolver import (
    ImportPathResolver,
    apply_aliases,
    resolve_import_path,
    resolve_relative,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


class TestResolveRelative:
    def test_parent_segments(self) -> None:
        assert (
            resolve_relative("../../components/ui/Text", "src/pages/aaa/bbb.ts")
            == "src/components/ui/Text"
        )

    def test_current_directory(self) -> None:
        resolved = resolve_relative("./Button", "src/components/ui/Text.tsx")
        assert resolved == "src/components/ui/Button"

    def test_importer_at_root(self) -> None:
        assert resolve_relative("./lib/util", "index.ts") == "lib/util"

    def test_trailing_slash_kept(self) -> None:
        assert resolve_relative("./ui/", "src/components/index.ts") == "src/components/ui/"


class TestApplyAliases:
    def test_no_aliases(self) -> None:
        assert apply_aliases("components/aaa/bbb", PathAliasMap()) == "components/aaa/bbb"

    def test_star_stripped_from_both_sides(self) -> None:
        alias_map = PathAliasMap(aliases=(("@/components/*", "src/components/*"),))
        assert apply_aliases("@/components/aaa/bbb", alias_map) == "src/components/aaa/bbb"

    def test_only_first_occurrence_replaced(self) -> None:
        alias_map = PathAliasMap(aliases=(("@/", "src/"),))
        assert apply_aliases("@/a/@/b", alias_map) == "src/a/@/b"

    def test_substitutions_accumulate(self) -> None:
        # The second alias sees the output of the first.
        alias_map = PathAliasMap(aliases=(("@/", "~/"), ("~/", "src/")))
        assert apply_aliases("@/components/Text", alias_map) == "src/components/Text"

    def test_order_matters(self) -> None:
        alias_map = PathAliasMap(aliases=(("~/", "src/"), ("@/", "~/")))
        assert apply_aliases("@/components/Text", alias_map) == "~/components/Text"

    def test_substring_replacement_not_anchored(self) -> None:
        alias_map = PathAliasMap(aliases=(("lib", "vendor"),))
        assert apply_aliases("src/lib/x", alias_map) == "src/vendor/x"


class TestResolveImportPath:
    def test_relative_resolved_with_importer(self, tmp_project: Path) -> None:
        resolved = resolve_import_path(
            "../../components/ui/Text", "src/pages/aaa/bbb.ts", project_root=tmp_project
        )
        assert resolved == "src/components/ui/Text"

    def test_relative_left_alone_without_importer(self, tmp_project: Path) -> None:
        resolved = resolve_import_path("../../components/ui/Text", project_root=tmp_project)
        assert resolved == "../../components/ui/Text"

    def test_non_relative_not_joined(self, tmp_project: Path) -> None:
        resolved = resolve_import_path("react", "src/pages/aaa/bbb.ts", project_root=tmp_project)
        assert resolved == "react"

    def test_no_tsconfig(self, tmp_project: Path) -> None:
        assert resolve_import_path("components/aaa/bbb", project_root=tmp_project) == (
            "components/aaa/bbb"
        )

    def test_broken_tsconfig(self, tmp_project: Path) -> None:
        (tmp_project / "tsconfig.json").write_text("{", encoding="utf-8")
        assert resolve_import_path("@/components/aaa", project_root=tmp_project) == (
            "@/components/aaa"
        )

    def test_no_paths_setting(
        self, tmp_project: Path, write_tsconfig: Callable[[dict[str, Any]], Path]
    ) -> None:
        write_tsconfig({})
        assert resolve_import_path("components/aaa/bbb", project_root=tmp_project) == (
            "components/aaa/bbb"
        )

    @pytest.mark.parametrize(
        ("alias", "target", "expected"),
        [
            ("@/components/", "components/", "components/aaa/bbb"),
            ("@/components", "components", "components/aaa/bbb"),
            ("@/components/*", "components/*", "components/aaa/bbb"),
        ],
    )
    def test_tsconfig_paths(
        self,
        tmp_project: Path,
        write_tsconfig: Callable[[dict[str, Any]], Path],
        alias: str,
        target: str,
        expected: str,
    ) -> None:
        write_tsconfig({"compilerOptions": {"paths": {alias: [target]}}})
        assert resolve_import_path("components/aaa/bbb", project_root=tmp_project) == (
            "components/aaa/bbb"
        )
        assert resolve_import_path("@/components/aaa/bbb", project_root=tmp_project) == expected

    @pytest.mark.parametrize(
        ("base_url", "expected"),
        [
            (".", "components/aaa/bbb"),
            ("./", "components/aaa/bbb"),
            ("../", "../components/aaa/bbb"),
            ("src", "src/components/aaa/bbb"),
            ("./src", "src/components/aaa/bbb"),
            ("src/", "src/components/aaa/bbb"),
            ("./src/", "src/components/aaa/bbb"),
        ],
    )
    def test_tsconfig_paths_with_base_url(
        self,
        tmp_project: Path,
        write_tsconfig: Callable[[dict[str, Any]], Path],
        base_url: str,
        expected: str,
    ) -> None:
        write_tsconfig(
            {"compilerOptions": {"baseUrl": base_url, "paths": {"@/components/": ["components/"]}}}
        )
        assert resolve_import_path("components/aaa/bbb", project_root=tmp_project) == (
            "components/aaa/bbb"
        )
        assert resolve_import_path("@/components/aaa/bbb", project_root=tmp_project) == expected

    def test_relative_then_alias(
        self, tmp_project: Path, write_tsconfig: Callable[[dict[str, Any]], Path]
    ) -> None:
        write_tsconfig({"compilerOptions": {"paths": {"legacy/": ["src/legacy/"]}}})
        resolved = resolve_import_path("../legacy/api", "app/main.ts", project_root=tmp_project)
        assert resolved == "src/legacy/api"

    def test_idempotent(
        self, tmp_project: Path, write_tsconfig: Callable[[dict[str, Any]], Path]
    ) -> None:
        write_tsconfig({"compilerOptions": {"baseUrl": "src", "paths": {"@/*": ["*"]}}})
        first = resolve_import_path("@/ui/Text", "src/pages/a.ts", project_root=tmp_project)
        second = resolve_import_path("@/ui/Text", "src/pages/a.ts", project_root=tmp_project)
        assert first == second == "src/ui/Text"

    def test_custom_alias_loader(self, tmp_project: Path) -> None:
        def _loader(_root: Path) -> PathAliasMap:
            return PathAliasMap(aliases=(("#/", "packages/"),))

        assert (
            resolve_import_path("#/core/x", project_root=tmp_project, alias_loader=_loader)
            == "packages/core/x"
        )


class TestImportPathResolver:
    def test_reads_config_every_call(
        self, tmp_project: Path, write_tsconfig: Callable[[dict[str, Any]], Path]
    ) -> None:
        resolver = ImportPathResolver(tmp_project)
        write_tsconfig({"compilerOptions": {"paths": {"@/": ["src/"]}}})
        assert resolver.resolve("@/a") == "src/a"

        write_tsconfig({"compilerOptions": {"paths": {"@/": ["app/"]}}})
        assert resolver.resolve("@/a") == "app/a"

    def test_with_cache(
        self, tmp_project: Path, write_tsconfig: Callable[[dict[str, Any]], Path]
    ) -> None:
        write_tsconfig({"compilerOptions": {"paths": {"@/": ["src/"]}}})
        resolver = ImportPathResolver(tmp_project, cache=AliasCache())
        assert resolver.resolve("@/a") == "src/a"
        assert resolver("./b", "src/x/y.ts") == "src/x/b"
