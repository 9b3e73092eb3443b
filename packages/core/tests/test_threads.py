"""Tests for GitHub thread helper functions."""

import types
from unittest.mock import MagicMock

import pytest

from runbot_core.errors import MalformedInputError
from runbot_core.gh.threads import get_comments, is_authorized, issue_number_from_url, mark_read, user_login


def _owned(login):
    return types.SimpleNamespace(user=types.SimpleNamespace(login=login) if login is not None else None)


class TestIssueNumberFromUrl:
    def test_pull_url(self):
        assert issue_number_from_url("https://api.github.com/repos/dominikh/go-mode.el/pulls/312") == 312

    def test_trailing_slash(self):
        assert issue_number_from_url("https://api.github.com/repos/o/r/issues/7/") == 7

    @pytest.mark.parametrize("url", ["", None, "https://api.github.com/repos/o/r/pulls/abc"])
    def test_rejects_non_numeric(self, url):
        with pytest.raises(MalformedInputError):
            issue_number_from_url(url)


class TestUserLogin:
    def test_returns_login(self):
        assert user_login(_owned("psanford")) == "psanford"

    def test_missing_user(self):
        assert user_login(_owned(None)) == ""

    def test_object_without_user_attribute(self):
        assert user_login(object()) == ""


class TestIsAuthorized:
    def test_allowed_user(self):
        assert is_authorized(_owned("dominikh"), ["psanford", "dominikh"])

    def test_other_user(self):
        assert not is_authorized(_owned("mallory"), ["psanford", "dominikh"])

    def test_missing_user_never_authorized(self):
        assert not is_authorized(_owned(None), ["", "psanford"])


def test_get_comments_materialises_list():
    issue = MagicMock()
    issue.get_comments.return_value = iter([1, 2])
    assert get_comments(issue) == [1, 2]


def test_mark_read_calls_api():
    notification = MagicMock()
    mark_read(notification)
    notification.mark_as_read.assert_called_once_with()
