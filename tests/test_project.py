"""Tests for per-project governance checks."""

import asyncio
from dataclasses import replace

import pytest

from oss_audit.errors import AuditError, NotFoundError, OwnershipParseError, PolicyViolation
from oss_audit.github.models import RepoInfo
from oss_audit.validate.project import (
    Outcome,
    Project,
    check_archive_status,
    check_ecosystem_registration,
    check_membership,
    check_website_inclusion,
    lookup_maintainers,
)

from conftest import FakeClient, codeowners_file


def validate(project, context, client, policy):
    return asyncio.run(project.validate(context, client, policy))


class TestNewProject:
    def test_starts_unchecked(self):
        project = Project(name="foo")
        assert project.has_errors()
        assert len(project.errors()) == 4
        assert all("not yet been validated" in str(e) for e in project.errors())


class TestMembership:
    def test_non_member_named(self, policy):
        with pytest.raises(PolicyViolation) as exc_info:
            check_membership(frozenset({"a", "b"}), frozenset({"a"}), policy)
        assert str(exc_info.value) == "Maintainers not public acme members: b"

    def test_allow_listed_non_member(self, policy):
        policy = replace(policy, allowed_non_member_maintainers=frozenset({"b"}))
        check_membership(frozenset({"a", "b"}), frozenset({"a"}), policy)

    def test_names_sorted(self, policy):
        with pytest.raises(PolicyViolation, match="members: x, y, z"):
            check_membership(frozenset({"z", "x", "y"}), frozenset(), policy)


class TestLookupMaintainers:
    def test_main_branch(self, make_context, policy):
        client = FakeClient(files=codeowners_file("foo", "* @alice"))
        context = make_context(members={"alice"})
        result = asyncio.run(lookup_maintainers("foo", context, client, policy))
        assert result == {"alice"}

    def test_falls_back_to_master(self, make_context, policy):
        client = FakeClient(files=codeowners_file("foo", "* @alice", branch="master"))
        context = make_context(members={"alice"})
        result = asyncio.run(lookup_maintainers("foo", context, client, policy))
        assert result == {"alice"}
        branches = [c[2] for c in client.calls]
        assert branches == ["main", "master"]

    def test_falls_back_after_unexpected_error(self, make_context, policy):
        class ResetOnMain(FakeClient):
            def download_repo_file(self, org, repo, ref, path):
                if ref == "main":
                    self.calls.append(("file", repo, ref, path))
                    raise RuntimeError("connection reset")
                return super().download_repo_file(org, repo, ref, path)

        client = ResetOnMain(files=codeowners_file("foo", "* @alice", branch="master"))
        context = make_context(members={"alice"})
        result = asyncio.run(lookup_maintainers("foo", context, client, policy))
        assert result == {"alice"}
        assert [c[2] for c in client.calls] == ["main", "master"]

    def test_no_codeowners(self, make_context, policy):
        context = make_context(members={"alice"})
        with pytest.raises(AuditError) as exc_info:
            asyncio.run(lookup_maintainers("foo", context, FakeClient(), policy))
        assert str(exc_info.value) == "Unable to determine maintainers"
        assert isinstance(exc_info.value.__cause__, NotFoundError)
        assert "/master/" in str(exc_info.value.__cause__)

    def test_malformed_codeowners(self, make_context, policy):
        client = FakeClient(files=codeowners_file("foo", "* alice"))
        with pytest.raises(AuditError) as exc_info:
            asyncio.run(lookup_maintainers("foo", make_context(), client, policy))
        assert isinstance(exc_info.value.__cause__, OwnershipParseError)

    def test_no_wildcard(self, make_context, policy):
        client = FakeClient(files=codeowners_file("foo", "docs/ @alice"))
        with pytest.raises(PolicyViolation, match="No maintainers were found"):
            asyncio.run(lookup_maintainers("foo", make_context(), client, policy))


class TestArchiveStatus:
    def test_active(self, make_context, policy):
        check_archive_status("foo", make_context(repos=[RepoInfo("foo")]), policy)

    def test_archived(self, make_context, policy):
        context = make_context(repos=[RepoInfo("foo", archived=True)])
        with pytest.raises(PolicyViolation, match="archived"):
            check_archive_status("foo", context, policy)

    def test_missing(self, make_context, policy):
        with pytest.raises(NotFoundError, match="Unable to find project in the acme"):
            check_archive_status("foo", make_context(), policy)


class TestEcosystemRegistration:
    def test_rust_project_missing(self, make_context, policy):
        context = make_context(ecosystem_doc="- other-crate")
        with pytest.raises(PolicyViolation, match="Rust project not in the rust-ecosystem README"):
            check_ecosystem_registration("foo", frozenset({"rust"}), context, policy)

    def test_rust_project_listed(self, make_context, policy):
        context = make_context(ecosystem_doc="- [foo](https://github.com/acme/foo)")
        check_ecosystem_registration("foo", frozenset({"rust"}), context, policy)

    def test_untagged_project_passes(self, make_context, policy):
        context = make_context(ecosystem_doc="")
        check_ecosystem_registration("foo", frozenset({"python"}), context, policy)


class TestWebsiteInclusion:
    def test_listed(self, make_context, policy):
        check_website_inclusion("foo", make_context(website=[("foo", set())]), policy)

    def test_not_listed(self, make_context, policy):
        with pytest.raises(PolicyViolation, match="opensource-website data.json"):
            check_website_inclusion("foo", make_context(), policy)


class TestValidate:
    def test_passing_project(self, make_context, policy):
        client = FakeClient(files=codeowners_file("foo", "* @alice"))
        context = make_context(
            members={"alice"},
            repos=[RepoInfo("foo")],
            website=[("foo", set())],
        )
        project = validate(Project(name="foo"), context, client, policy)
        assert not project.has_errors()
        assert project.maintainers.value == {"alice"}

    def test_independent_failures(self, make_context, policy):
        client = FakeClient(files=codeowners_file("bar", "* @mallory"))
        context = make_context(
            members={"alice"},
            repos=[RepoInfo("bar", archived=True)],
            ecosystem_doc="- foo",
            website=[("bar", {"rust"})],
        )
        project = validate(Project("bar", tags=frozenset({"rust"})), context, client, policy)
        messages = [str(e) for e in project.errors()]
        assert messages == [
            "Maintainers not public acme members: mallory",
            "Project has been archived on GitHub",
            "Rust project not in the rust-ecosystem README",
        ]
        assert project.website_status.ok

    def test_all_checks_fail_together(self, make_context, policy):
        project = validate(Project("ghost", tags=frozenset({"rust"})), make_context(), FakeClient(), policy)
        assert len(project.errors()) == 4

    def test_transport_failure_is_captured(self, make_context, policy):
        client = FakeClient(failures={"download_repo_file": RuntimeError("boom")})
        context = make_context(repos=[RepoInfo("foo")], website=[("foo", set())])
        project = validate(Project("foo"), context, client, policy)
        errors = project.errors()
        assert [str(e) for e in errors] == ["Unable to determine maintainers"]
        assert str(errors[0].__cause__) == "boom"

    def test_original_is_unchanged(self, make_context, policy):
        client = FakeClient(files=codeowners_file("foo", "* @alice"))
        context = make_context(members={"alice"}, repos=[RepoInfo("foo")], website=[("foo", set())])
        original = Project("foo")
        validate(original, context, client, policy)
        assert original.has_errors()

    def test_idempotent(self, make_context, policy):
        client = FakeClient(files=codeowners_file("bar", "* @mallory"))
        context = make_context(members={"alice"}, repos=[RepoInfo("bar", archived=True)])
        first = validate(Project("bar"), context, client, policy)
        second = validate(Project("bar"), context, client, policy)
        assert first == second


class TestOutcome:
    def test_success(self):
        assert Outcome.success({"a"}).ok

    def test_failures_compare_by_message(self):
        assert Outcome.failure(PolicyViolation("x")) == Outcome.failure(PolicyViolation("x"))
        assert Outcome.failure(PolicyViolation("x")) != Outcome.failure(PolicyViolation("y"))
        assert Outcome.failure(PolicyViolation("x")) != Outcome.success()
