"""Blocking GitHub transport built on requests.

Raw repository files come from raw.githubusercontent.com; organisation
members and repositories come from the paginated REST API. Callers run
these methods in worker threads to overlap requests.
"""

from __future__ import annotations

import json
import logging
import re
import threading

import requests

from oss_audit.errors import NotFoundError, TransportError
from oss_audit.github.models import RepoInfo, member_login

logger = logging.getLogger(__name__)

RAW_URL = "https://raw.githubusercontent.com"
API_URL = "https://api.github.com"
USER_AGENT = "oss-audit"
TIMEOUT = 60

_NEXT_LINK = re.compile(r'<(?P<url>.+)>; *rel="next"')


def parse_next_link_url(content: str) -> str | None:
    """Return the URL of one ``<url>; rel="next"`` link entry, if it is one."""
    match = _NEXT_LINK.search(content)
    return match.group("url") if match else None


def next_page_from_link_header(header: str | None) -> str | None:
    """Find the ``rel="next"`` URL in a comma-separated Link header.

    Raises:
        TransportError: If the header value isn't plain text.
    """
    if header is None:
        return None
    try:
        header.encode("ascii")
    except UnicodeEncodeError as e:
        raise TransportError("Link header is not valid text") from e
    for entry in header.split(","):
        url = parse_next_link_url(entry)
        if url:
            return url
    return None


class GitHubClient:
    """Session-backed access to one organisation's GitHub data.

    Each worker thread gets its own requests.Session. A session passed in
    explicitly is shared by every thread.
    """

    def __init__(self, token: str | None = None, session: requests.Session | None = None):
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }
        if token:
            self.headers["Authorization"] = f"token {token}"
        self._shared = session
        if session is not None:
            session.headers.update(self.headers)
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        """The session for the calling thread."""
        if self._shared is not None:
            return self._shared
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self.headers)
            self._local.session = session
        return session

    # ── Raw repository files ─────────────────────────────────────

    def fetch_repo_file(self, org: str, repo: str, ref: str, path: str) -> bytes | None:
        """Download a file from a repository at ``ref``.

        Returns:
            The file contents, or None if GitHub answers 404.

        Raises:
            TransportError: On network failure or any other non-2xx status.
        """
        name = f"{org}/{repo}/{ref}/{path}"
        url = f"{RAW_URL}/{name}"
        logger.debug("GET %s", url)
        try:
            response = self.session.get(url, timeout=TIMEOUT)
        except requests.RequestException as e:
            raise TransportError(f"Failed to download {name}") from e

        if response.status_code == 404:
            return None
        if not 200 <= response.status_code < 300:
            cause = TransportError(f"Expected status code 200, got {response.status_code}")
            raise TransportError(f"Unable to download {name}") from cause
        return response.content

    def download_repo_file(self, org: str, repo: str, ref: str, path: str) -> str:
        """Download a text file, treating absence as an error.

        Raises:
            NotFoundError: If the file does not exist at ``ref``.
            TransportError: On any other failure, or if it isn't UTF-8.
        """
        name = f"{org}/{repo}/{ref}/{path}"
        content = self.fetch_repo_file(org, repo, ref, path)
        if content is None:
            cause = NotFoundError("File not found in repo")
            raise NotFoundError(f"Unable to download {name}") from cause
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TransportError(f"Failed to decode {name}") from e

    def download_repo_json_file(self, org: str, repo: str, ref: str, path: str) -> object:
        """Download and decode a JSON file, treating absence as an error."""
        text = self.download_repo_file(org, repo, ref, path)
        try:
            return json.loads(text)
        except ValueError as e:
            raise TransportError(f"Failed to decode {org}/{repo}/{ref}/{path}") from e

    # ── Paginated API ────────────────────────────────────────────

    def api_list(self, url: str) -> list:
        """GET a paginated endpoint returning a JSON array per page.

        Follows ``rel="next"`` Link headers until none remain and returns
        every page's items as one list.
        """
        collection: list = []
        next_url: str | None = url
        while next_url:
            response = self._api_get(next_url)
            next_url = next_page_from_link_header(response.headers.get("link"))
            try:
                items = response.json()
            except ValueError as e:
                raise TransportError("Unable to parse JSON response") from e
            if not isinstance(items, list):
                raise TransportError(f"Expected a JSON array from {response.url}")
            collection.extend(items)
        return collection

    def _api_get(self, url: str) -> requests.Response:
        logger.debug("GET %s", url)
        try:
            response = self.session.get(url, timeout=TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f"Failed to get {url}") from e
        return response

    def public_organisation_members(self, org: str) -> set[str]:
        """Logins of the publicly visible members of ``org``."""
        url = f"{API_URL}/orgs/{org}/members?per_page=100"
        try:
            return {member_login(m) for m in self.api_list(url)}
        except TransportError as e:
            raise TransportError("Unable to get public members for organisation") from e

    def organisation_repos(self, org: str) -> dict[str, RepoInfo]:
        """All repositories of ``org``, keyed by name."""
        url = f"{API_URL}/orgs/{org}/repos?per_page=100"
        try:
            repos = [RepoInfo.from_json(r) for r in self.api_list(url)]
        except TransportError as e:
            raise TransportError("Unable to get repositories for organisation") from e
        return {repo.name: repo for repo in repos}
