"""Shared fixtures: forge deliveries as CGI variables plus JSON bodies."""

import json

import pytest

SITE = "example.org"
GITLAB_URL = "https://gitlab.com/example/site"
BITBUCKET_URL = "https://bitbucket.org/example/site"
GITHUB_URL = "https://github.com/example/site"


def make_vars(**extra):
    variables = {
        "CONTENT_TYPE": "application/json",
        "HTTP_HOST": SITE,
    }
    variables.update(extra)
    return variables


@pytest.fixture
def gitlab_push():
    """(variables, body) for a GitLab push to main."""
    variables = make_vars(
        HTTP_X_GITLAB_EVENT="Push Hook",
        HTTP_USER_AGENT="GitLab/16.8.0",
    )
    body = json.dumps({
        "object_kind": "push",
        "ref": "refs/heads/main",
        "repository": {"name": "site", "homepage": GITLAB_URL},
        "project": {"web_url": GITLAB_URL},
    })
    return variables, body


@pytest.fixture
def bitbucket_push():
    """(variables, body) for a Bitbucket push to main."""
    variables = make_vars(
        HTTP_X_EVENT_KEY="repo:push",
        HTTP_USER_AGENT="Bitbucket-Webhooks/2.0",
    )
    body = json.dumps({
        "push": {"changes": [{"new": {"type": "branch", "name": "main"}}]},
        "repository": {"full_name": "example/site", "website": BITBUCKET_URL},
    })
    return variables, body


@pytest.fixture
def github_push():
    """(variables, body) for a GitHub push to main."""
    variables = make_vars(
        HTTP_X_GITHUB_EVENT="push",
        HTTP_USER_AGENT="GitHub-Hookshot/abc1234",
    )
    body = json.dumps({
        "ref": "refs/heads/main",
        "repository": {"full_name": "example/site", "html_url": GITHUB_URL},
    })
    return variables, body
