"""
Request — transport variables plus the JSON object posted by the forge.

Variables use CGI names: CONTENT_TYPE, DOCUMENT_ROOT and HTTP_<HEADER> for
request headers (e.g. HTTP_X_GITLAB_EVENT).
"""

import json
import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from .errors import InvalidRequest

log = logging.getLogger("updater.request")

JSON_CONTENT_TYPE = "application/json"


def header_variable(name: str) -> str:
    """Map an HTTP header name to its CGI variable ("X-Gitlab-Event" -> "HTTP_X_GITLAB_EVENT")."""
    key = name.upper().replace("-", "_")
    if key in ("CONTENT_TYPE", "CONTENT_LENGTH"):
        return key
    return f"HTTP_{key}"


def header_variables(headers: Mapping[str, str], document_root: str = "") -> Dict[str, str]:
    """CGI variables for a set of HTTP headers, plus DOCUMENT_ROOT when given."""
    variables = {header_variable(k): v for k, v in headers.items()}
    if document_root:
        variables["DOCUMENT_ROOT"] = document_root
    return variables


class Request:
    """Read-only view of one webhook delivery."""

    def __init__(self, variables: Mapping[str, str], body: Optional[Union[str, bytes]]):
        self._vars = MappingProxyType(dict(variables))

        if self.get("CONTENT_TYPE") != JSON_CONTENT_TYPE:
            raise InvalidRequest("Invalid content-type")

        self._json = self._parse(body)

    @classmethod
    def from_headers(
        cls,
        headers: Mapping[str, str],
        body: Optional[Union[str, bytes]],
        document_root: str = "",
    ) -> "Request":
        """Build a request from raw HTTP headers."""
        return cls(header_variables(headers, document_root), body)

    @staticmethod
    def _parse(body: Optional[Union[str, bytes]]) -> Dict[str, Any]:
        if not body:
            raise InvalidRequest("Invalid JSON")
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
            # RecursionError: nesting deeper than the decoder can follow
            log.debug(f"Body rejected: {exc}")
            raise InvalidRequest("Invalid JSON") from exc
        if not isinstance(payload, dict):
            raise InvalidRequest("Invalid JSON")
        return payload

    def get(self, name: str) -> str:
        """Return a transport variable, or an empty string if absent."""
        return self._vars.get(name) or ""

    def json(self) -> Dict[str, Any]:
        return self._json

    @property
    def variables(self) -> Mapping[str, str]:
        return self._vars
