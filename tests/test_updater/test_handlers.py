"""
Test forge detection and payload normalization
"""

import json

import pytest

from updater.errors import NoHandler, Unsupported
from updater.handlers import HANDLERS, detect, get_handler, list_handlers
from updater.handlers.base import EventKind, dig
from updater.handlers.bitbucket import BitbucketHandler
from updater.handlers.github import GitHubHandler
from updater.handlers.gitlab import GitLabHandler
from updater.request import Request

from conftest import BITBUCKET_URL, GITLAB_URL, make_vars


def request(body=None, **variables):
    return Request(make_vars(**variables), json.dumps(body if body is not None else {}))


class TestDetection:
    """Test which handler claims a request"""

    def test_order(self):
        assert HANDLERS == [GitLabHandler, BitbucketHandler, GitHubHandler]
        assert list(list_handlers()) == ["gitlab", "bitbucket", "github"]

    def test_gitlab(self, gitlab_push):
        assert isinstance(detect(Request(*gitlab_push)), GitLabHandler)

    def test_bitbucket(self, bitbucket_push):
        assert isinstance(detect(Request(*bitbucket_push)), BitbucketHandler)

    def test_github(self, github_push):
        assert isinstance(detect(Request(*github_push)), GitHubHandler)

    def test_no_event_header(self):
        with pytest.raises(NoHandler):
            detect(request(HTTP_USER_AGENT="GitLab/16.8.0"))

    def test_user_agent_mismatch(self):
        """Header present but user agent from another forge"""
        with pytest.raises(NoHandler):
            detect(request(HTTP_X_GITLAB_EVENT="Push Hook", HTTP_USER_AGENT="GitHub-Hookshot/1"))

    def test_user_agent_is_a_prefix(self):
        """The forge name elsewhere in the user agent is not enough"""
        with pytest.raises(NoHandler):
            detect(request(HTTP_X_GITLAB_EVENT="Push Hook", HTTP_USER_AGENT="curl GitLab/16"))

    def test_first_handler_wins(self):
        """A request carrying two forges' headers goes to the earlier handler"""
        handler = detect(request(
            HTTP_X_GITHUB_EVENT="push",
            HTTP_X_EVENT_KEY="repo:push",
            HTTP_USER_AGENT="Bitbucket-Webhooks/2.0",
        ))
        assert isinstance(handler, BitbucketHandler)

    def test_first_handler_wins_when_both_accept(self, monkeypatch):
        monkeypatch.setattr(GitHubHandler, "user_agent", "")
        monkeypatch.setattr(GitLabHandler, "user_agent", "")
        handler = detect(request(HTTP_X_GITHUB_EVENT="push", HTTP_X_GITLAB_EVENT="Push Hook"))
        assert isinstance(handler, GitLabHandler)

    def test_get_handler(self):
        assert get_handler("bitbucket") is BitbucketHandler
        with pytest.raises(KeyError):
            get_handler("gitea")


class TestEvents:
    """Test event header mapping"""

    def test_push(self, gitlab_push, bitbucket_push, github_push):
        for delivery in (gitlab_push, bitbucket_push, github_push):
            assert detect(Request(*delivery)).get_event() is EventKind.PUSH

    def test_unknown_event_is_none(self):
        handler = detect(request(HTTP_X_GITLAB_EVENT="Tag Push Hook", HTTP_USER_AGENT="GitLab/16"))
        assert handler.get_event() is None


class TestGitLab:
    """Test GitLab payload extraction"""

    def test_branch_and_url(self, gitlab_push):
        handler = GitLabHandler(Request(*gitlab_push))
        assert handler.get_branch() == "main"
        assert handler.get_url() == GITLAB_URL

    def test_branch_is_last_segment(self):
        handler = GitLabHandler(request({"ref": "refs/heads/feature/login"}))
        assert handler.get_branch() == "login"

    def test_missing_fields_are_empty(self):
        handler = GitLabHandler(request({}))
        assert handler.get_branch() == ""
        assert handler.get_url() == ""


class TestBitbucket:
    """Test Bitbucket payload extraction"""

    def test_branch_and_url(self, bitbucket_push):
        handler = BitbucketHandler(Request(*bitbucket_push))
        assert handler.get_branch() == "main"
        assert handler.get_url() == BITBUCKET_URL

    def test_deleted_branch(self):
        """A branch deletion has "new": null"""
        handler = BitbucketHandler(request({"push": {"changes": [{"new": None}]}}))
        assert handler.get_branch() == ""

    def test_no_changes(self):
        handler = BitbucketHandler(request({"push": {"changes": []}, "repository": {"website": None}}))
        assert handler.get_branch() == ""
        assert handler.get_url() == ""


class TestGitHub:
    """GitHub is detected but cannot be normalized"""

    def test_branch_unsupported(self, github_push):
        with pytest.raises(Unsupported):
            GitHubHandler(Request(*github_push)).get_branch()

    def test_url_unsupported(self, github_push):
        with pytest.raises(Unsupported):
            GitHubHandler(Request(*github_push)).get_url()


class TestDig:

    def test_paths(self):
        doc = {"a": [{"b": "c"}], "n": None}
        assert dig(doc, "a", 0, "b") == "c"
        assert dig(doc, "a", 1, "b") is None
        assert dig(doc, "n", "x") is None
        assert dig(doc, "a", "b") is None
        assert dig(doc, "a", 0, 0) is None
