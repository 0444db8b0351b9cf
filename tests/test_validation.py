"""
Tests for repostream.domain: error codes and input validation.
"""

import pytest

from repostream.domain import (
    ErrorCode,
    RepoError,
    normalize_tree_path,
    sanitize_repository_id,
    validate_page_value,
    validate_revision,
)


class TestSanitizeRepositoryId:
    """Tests for sanitize_repository_id."""

    @pytest.mark.parametrize("name,expected", [
        ("project", "project/"),
        ("project/", "project/"),
        ("./project", "project/"),
        ("a/../project", "project/"),
        ("team/project", "team/project/"),
        ("dots.in.name", "dots.in.name/"),
    ])
    def test_valid_identifiers(self, name, expected):
        assert sanitize_repository_id(name) == expected

    @pytest.mark.parametrize("name", [
        None,
        "",
        "   ",
        ".",
        "..",
        "../etc",
        "../../etc",
        "project/../..",
        "a/../../b",
        "/etc",
        "/",
    ])
    def test_invalid_identifiers(self, name):
        assert sanitize_repository_id(name) is None

    def test_result_ends_with_single_separator(self):
        result = sanitize_repository_id("nested//project//")
        assert result == "nested/project/"


class TestValidateRevision:
    """Tests for validate_revision."""

    @pytest.mark.parametrize("revision", [
        "main",
        "HEAD",
        "HEAD~2",
        "feature/login",
        "v1.0.0",
        "0123456789abcdef0123456789abcdef01234567",
    ])
    def test_accepts_revisions(self, revision):
        assert validate_revision(revision) == revision

    @pytest.mark.parametrize("revision", [
        None,
        "",
        "-n1",
        "--all",
        "--output=/tmp/x",
        "^main",
        "main..feature",
        "HEAD:secret",
        "main branch",
        "main\n",
        "bad\x00rev",
    ])
    def test_rejects_unsafe_revisions(self, revision):
        with pytest.raises(RepoError) as exc_info:
            validate_revision(revision)
        assert exc_info.value.code is ErrorCode.INVALID_ARGUMENT


class TestNormalizeTreePath:
    """Tests for normalize_tree_path."""

    @pytest.mark.parametrize("path,expected", [
        (None, ""),
        ("", ""),
        ("/", ""),
        (".", ""),
        ("src", "src"),
        ("/src/", "src"),
        ("src/./lib", "src/lib"),
        ("src/../docs", "docs"),
        ("name with spaces", "name with spaces"),
    ])
    def test_normalizes(self, path, expected):
        assert normalize_tree_path(path) == expected

    @pytest.mark.parametrize("path", ["..", "../outside", "src/../../x", "bad\nname", "nul\x00"])
    def test_rejects(self, path):
        with pytest.raises(RepoError) as exc_info:
            normalize_tree_path(path)
        assert exc_info.value.code is ErrorCode.INVALID_ARGUMENT


class TestValidatePageValue:
    """Tests for validate_page_value."""

    def test_none_passes(self):
        assert validate_page_value(None, "skip") is None

    def test_zero_and_positive(self):
        assert validate_page_value(0, "skip") == 0
        assert validate_page_value(25, "limit") == 25

    @pytest.mark.parametrize("value", [-1, True, "5", 1.5])
    def test_rejects(self, value):
        with pytest.raises(RepoError) as exc_info:
            validate_page_value(value, "limit")
        assert exc_info.value.code is ErrorCode.INVALID_ARGUMENT
        assert "limit" in exc_info.value.message


class TestRepoError:
    """Tests for RepoError."""

    def test_default_message(self):
        error = RepoError(ErrorCode.REPOSITORY_NOT_FOUND)
        assert error.message == "Repository not found"
        assert str(error) == "Repository not found"

    def test_custom_message(self):
        error = RepoError(ErrorCode.REVISION_NOT_FOUND, "fatal: bad revision 'nope'")
        assert error.to_dict() == {
            "errorCode": "REVISION_NOT_FOUND",
            "message": "fatal: bad revision 'nope'",
        }

    def test_every_code_has_a_default_message(self):
        for code in ErrorCode:
            assert RepoError(code).message
