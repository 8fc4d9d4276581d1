"""Tests for boilersync.sources.glob — pattern detection, matching and tree expansion."""

from unittest.mock import AsyncMock, call

import pytest

from boilersync.sources.glob import GlobExpander, expand_braces, is_pattern, match_path
from boilersync.sources.models import SourceAuthError, SourceNotFoundError


# ── is_pattern ──────────────────────────────────────────────────────


class TestIsPattern:
    def test_plain_paths(self):
        assert is_pattern(".eslintrc.js") is False
        assert is_pattern("src/index.ts") is False
        assert is_pattern(".github/workflows/ci.yml") is False

    @pytest.mark.parametrize(
        "path",
        ["*.md", ".github/ISSUE_TEMPLATE/*.md", "**/*.ts", "file?.ts", "[abc].ts", "file[0-9].ts"],
    )
    def test_wildcards(self, path):
        assert is_pattern(path) is True

    def test_brace_expansion(self):
        assert is_pattern("{a,b}.ts") is True
        assert is_pattern("*.{js,ts}") is True

    def test_lone_closing_bracket_counts(self):
        assert is_pattern("weird]name") is True


# ── expand_braces ───────────────────────────────────────────────────


class TestExpandBraces:
    def test_no_braces(self):
        assert expand_braces("src/*.ts") == ["src/*.ts"]

    def test_simple_alternation(self):
        assert expand_braces("*.{js,ts}") == ["*.js", "*.ts"]

    def test_multiple_groups(self):
        assert expand_braces("{a,b}/{x,y}") == ["a/x", "a/y", "b/x", "b/y"]

    def test_nested_groups(self):
        assert expand_braces("{a,{b,c}}.md") == ["a.md", "b.md", "c.md"]

    def test_single_item_group_is_literal(self):
        assert expand_braces("{a}.md") == ["{a}.md"]

    def test_literal_group_then_real_group(self):
        assert expand_braces("{a}/{x,y}") == ["{a}/x", "{a}/y"]

    def test_duplicates_removed(self):
        assert expand_braces("{a,a}.md") == ["a.md"]


# ── match_path ──────────────────────────────────────────────────────


class TestMatchPath:
    def test_star_stays_within_segment(self):
        assert match_path("src/*.ts", "src/index.ts") is True
        assert match_path("src/*.ts", "src/utils/helpers.ts") is False

    def test_globstar_matches_zero_or_more_dirs(self):
        assert match_path("configs/**/*.json", "configs/tsconfig.json") is True
        assert match_path("configs/**/*.json", "configs/nested/config.json") is True
        assert match_path("configs/**/*.json", "configs/a/b/c.json") is True

    def test_globstar_skips_dot_directories(self):
        assert match_path("**/*.yml", ".github/workflows/ci.yml") is False
        assert match_path(".github/**/*.yml", ".github/workflows/ci.yml") is True

    def test_star_does_not_match_dotfiles(self):
        assert match_path("*", ".prettierrc") is False
        assert match_path(".*", ".prettierrc") is True

    def test_question_mark(self):
        assert match_path("file?.ts", "file1.ts") is True
        assert match_path("file?.ts", "file10.ts") is False

    def test_character_class(self):
        assert match_path("file[0-9].ts", "file7.ts") is True
        assert match_path("file[0-9].ts", "filex.ts") is False
        assert match_path("file[!0-9].ts", "filex.ts") is True

    def test_caret_class_is_negated(self):
        assert match_path("file[^0-9].ts", "filex.ts") is True
        assert match_path("file[^0-9].ts", "file7.ts") is False

    def test_braces(self):
        assert match_path("src/*.{js,ts}", "src/index.ts") is True
        assert match_path("src/*.{js,ts}", "src/index.py") is False

    def test_case_sensitive(self):
        assert match_path("*.MD", "readme.md") is False

    def test_leading_dot_slash_ignored(self):
        assert match_path("./src/*.ts", "src/index.ts") is True


# ── GlobExpander.expand ─────────────────────────────────────────────


class TestGlobExpander:
    async def test_matches_issue_templates(self, github_source):
        expander = GlobExpander(github_source)
        files = await expander.expand("owner/repo", ".github/ISSUE_TEMPLATE/*.md", "main", "token")
        assert files == [
            ".github/ISSUE_TEMPLATE/bug_report.md",
            ".github/ISSUE_TEMPLATE/feature_request.md",
        ]

    async def test_globstar_pattern(self, github_source):
        files = await GlobExpander(github_source).expand("owner/repo", "**/*.ts", "main")
        assert files == ["src/index.ts", "src/utils/helpers.ts"]

    async def test_nested_recursive_pattern_sorted(self, github_source):
        files = await GlobExpander(github_source).expand("owner/repo", "configs/**/*.json", "main")
        assert files == ["configs/nested/config.json", "configs/tsconfig.json"]

    async def test_directories_excluded(self, github_source):
        files = await GlobExpander(github_source).expand("owner/repo", "*", "main")
        assert "src" not in files
        assert files == []  # only dotfiles and dirs live at the root

    async def test_no_match_returns_empty(self, github_source):
        files = await GlobExpander(github_source).expand("owner/repo", "*.nonexistent", "main")
        assert files == []

    async def test_branch_ref_uses_heads(self, github_source, mock_github_client):
        await GlobExpander(github_source).expand("owner/repo", "*.md", "main", "token")
        mock_github_client.get_ref_sha.assert_awaited_once_with("owner/repo", "heads/main", "token")
        mock_github_client.list_tree.assert_awaited_once_with("owner/repo", "commit-sha", "token")

    async def test_falls_back_to_tag(self, github_source, mock_github_client):
        mock_github_client.get_ref_sha = AsyncMock(
            side_effect=[SourceNotFoundError("Ref not found"), "tag-sha"]
        )
        files = await GlobExpander(github_source).expand("owner/repo", "src/*.ts", "v1.0.0", "tok")

        assert files == ["src/index.ts"]
        assert mock_github_client.get_ref_sha.await_args_list == [
            call("owner/repo", "heads/v1.0.0", "tok"),
            call("owner/repo", "tags/v1.0.0", "tok"),
        ]
        mock_github_client.list_tree.assert_awaited_once_with("owner/repo", "tag-sha", "tok")
        mock_github_client.get_commit_tree_sha.assert_not_awaited()

    async def test_tag_fallback_matches_explicit_tag_result(self, github_source, mock_github_client):
        expander = GlobExpander(github_source)
        direct = await expander.expand("owner/repo", "**/*.ts", "v1.0.0")

        mock_github_client.get_ref_sha = AsyncMock(
            side_effect=[SourceNotFoundError("Ref not found"), "commit-sha"]
        )
        via_fallback = await expander.expand("owner/repo", "**/*.ts", "v1.0.0")

        assert via_fallback == direct

    async def test_falls_back_to_commit(self, github_source, mock_github_client):
        mock_github_client.get_ref_sha = AsyncMock(
            side_effect=SourceNotFoundError("Ref not found")
        )
        await GlobExpander(github_source).expand("owner/repo", "*.md", "0a1b2c3d")

        assert mock_github_client.get_ref_sha.await_count == 2
        mock_github_client.get_commit_tree_sha.assert_awaited_once_with(
            "owner/repo", "0a1b2c3d", None
        )
        mock_github_client.list_tree.assert_awaited_once_with("owner/repo", "tree-sha", None)

    async def test_unknown_ref_raises_last_error(self, github_source, mock_github_client):
        mock_github_client.get_ref_sha = AsyncMock(side_effect=SourceNotFoundError("Ref not found"))
        mock_github_client.get_commit_tree_sha = AsyncMock(
            side_effect=SourceNotFoundError("Commit not found: nope in owner/repo")
        )
        with pytest.raises(SourceNotFoundError, match="Commit not found"):
            await GlobExpander(github_source).expand("owner/repo", "*.md", "nope")

    async def test_auth_error_does_not_fall_back(self, github_source, mock_github_client):
        mock_github_client.get_ref_sha = AsyncMock(side_effect=SourceAuthError("bad token"))
        with pytest.raises(SourceAuthError):
            await GlobExpander(github_source).expand("owner/repo", "*.md", "main")
        assert mock_github_client.get_ref_sha.await_count == 1

    async def test_missing_ref_resolves_default_branch_once(self, github_source, mock_github_client):
        mock_github_client.get_default_branch = AsyncMock(return_value="develop")
        expander = GlobExpander(github_source)

        await expander.expand("owner/repo", "*.md")
        await expander.expand("owner/repo", "src/*.ts")

        mock_github_client.get_default_branch.assert_awaited_once_with("owner/repo", None)
        mock_github_client.get_ref_sha.assert_awaited_with("owner/repo", "heads/develop", None)


class TestGlobExpanderResolverInterface:
    async def test_works_with_any_resolver(self, fake_resolver):
        fake_resolver.files.update(
            {
                ("acme/repo", "docs/a.md"): "a",
                ("acme/repo", "docs/b.md"): "b",
                ("acme/repo", "docs/c.txt"): "c",
                ("acme/other", "docs/z.md"): "z",
            }
        )

        files = await GlobExpander(fake_resolver).expand("acme/repo", "docs/*.md", None, "tok")

        assert files == ["docs/a.md", "docs/b.md"]
        assert fake_resolver.list_calls == [("acme/repo", "main", "tok")]

    async def test_explicit_ref_passed_to_listing(self, fake_resolver):
        await GlobExpander(fake_resolver).expand("acme/repo", "*.md", "v2")
        assert fake_resolver.list_calls == [("acme/repo", "v2", None)]
