"""Shared test fixtures for oss-audit."""

import json

import pytest

from oss_audit.errors import NotFoundError
from oss_audit.github.models import RepoInfo, WebsiteProject
from oss_audit.policy.rules import Policy
from oss_audit.validate.context import Context


class FakeClient:
    """In-memory stand-in for GitHubClient.

    ``files`` maps (repo, branch, path) to file text; ``failures`` maps a
    method name to the exception it should raise.
    """

    def __init__(self, files=None, members=(), repos=None, failures=None):
        self.files = dict(files or {})
        self.members = set(members)
        self.repos = dict(repos or {})
        self.failures = dict(failures or {})
        self.calls = []

    def _maybe_fail(self, method):
        if method in self.failures:
            raise self.failures[method]

    def download_repo_file(self, org, repo, ref, path):
        self.calls.append(("file", repo, ref, path))
        self._maybe_fail("download_repo_file")
        try:
            return self.files[(repo, ref, path)]
        except KeyError:
            raise NotFoundError(f"Unable to download {org}/{repo}/{ref}/{path}") from None

    def download_repo_json_file(self, org, repo, ref, path):
        return json.loads(self.download_repo_file(org, repo, ref, path))

    def public_organisation_members(self, org):
        self.calls.append(("members", org))
        self._maybe_fail("public_organisation_members")
        return set(self.members)

    def organisation_repos(self, org):
        self.calls.append(("repos", org))
        self._maybe_fail("organisation_repos")
        return dict(self.repos)


def codeowners_file(repo, text, branch="main"):
    return {(repo, branch, ".github/CODEOWNERS"): text}


def website_file(*projects):
    data = {"projects": [{"name": name, "tags": sorted(tags)} for name, tags in projects]}
    return {("opensource-website", "main", "data.json"): json.dumps(data)}


def ecosystem_file(text):
    return {("rust-ecosystem", "main", "README.md"): text}


@pytest.fixture
def policy():
    return Policy(organisation="acme", allowed_non_member_maintainers=frozenset())


@pytest.fixture
def make_context():
    def _make(members=(), repos=(), ecosystem_doc="", website=()):
        return Context.create(
            members=members,
            repos={r.name: r for r in repos},
            ecosystem_doc=ecosystem_doc,
            website_projects=[WebsiteProject(name, frozenset(tags)) for name, tags in website],
        )
    return _make


@pytest.fixture
def fake_org():
    """An organisation where foo passes and bar fails three checks.

    widget is an unlisted public repo; old-fork and .github are not
    public source projects.
    """
    files = {}
    files.update(codeowners_file("foo", "* @alice\n"))
    files.update(codeowners_file("bar", "* @mallory\n", branch="master"))
    files.update(codeowners_file("widget", "* @alice @bob\n"))
    files.update(ecosystem_file("# Rust ecosystem\n\n- foo\n"))
    files.update(website_file(("foo", {"rust"}), ("bar", {"rust"})))
    repos = {
        "foo": RepoInfo("foo"),
        "bar": RepoInfo("bar", archived=True),
        "widget": RepoInfo("widget"),
        "old-fork": RepoInfo("old-fork", fork=True),
        ".github": RepoInfo(".github"),
    }
    return FakeClient(files=files, members={"alice", "bob"}, repos=repos)
