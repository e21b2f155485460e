"""
Bitbucket Handler — bitbucket.org repositories.

Push payload: {"push": {"changes": [{"new": {"name": "main", ...}}]},
               "repository": {"website": ...}}
"""

from .base import EventKind, ProviderHandler, as_text, dig


class BitbucketHandler(ProviderHandler):

    name = "bitbucket"
    header = "HTTP_X_EVENT_KEY"
    events = {"repo:push": EventKind.PUSH}
    user_agent = "Bitbucket-Webhooks/"

    def get_branch(self) -> str:
        return as_text(dig(self.request.json(), "push", "changes", 0, "new", "name"))

    def get_url(self) -> str:
        return as_text(dig(self.request.json(), "repository", "website"))
