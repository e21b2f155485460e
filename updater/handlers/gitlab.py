"""
GitLab Handler — gitlab.com and self-hosted instances.

Push payload: {"ref": "refs/heads/main", "repository": {"homepage": ...}, ...}
"""

from .base import EventKind, ProviderHandler, as_text, dig


class GitLabHandler(ProviderHandler):

    name = "gitlab"
    header = "HTTP_X_GITLAB_EVENT"
    events = {"Push Hook": EventKind.PUSH}
    user_agent = "GitLab/"

    def get_branch(self) -> str:
        ref = as_text(dig(self.request.json(), "ref"))
        return ref.rstrip("/").rsplit("/", 1)[-1]

    def get_url(self) -> str:
        # project.web_url carries the same value
        return as_text(dig(self.request.json(), "repository", "homepage"))
