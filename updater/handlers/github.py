"""
GitHub Handler — detection only.

Deliveries are recognised and their event mapped, but branch and url
extraction are not available: any delivery that reaches hook matching fails
with Unsupported rather than silently matching nothing.
"""

from ..errors import Unsupported
from .base import EventKind, ProviderHandler


class GitHubHandler(ProviderHandler):

    name = "github"
    header = "HTTP_X_GITHUB_EVENT"
    events = {"push": EventKind.PUSH}
    user_agent = "GitHub-Hookshot/"

    def get_branch(self) -> str:
        raise Unsupported("get_branch() not implemented for github")

    def get_url(self) -> str:
        raise Unsupported("get_url() not implemented for github")
