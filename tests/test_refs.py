"""
Tests for repository and project board references.

Feature: issues-watcher
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from issues_watcher.exceptions import MalformedReferenceError
from issues_watcher.refs import (
    ProjectRef,
    RepoRef,
    parse_project_ref,
    parse_repo_ref,
    select_projects,
)

# Owner and repository names as the platform allows them
name_strategy = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_"),
    min_size=1,
    max_size=30,
)


def test_parse_repo_ref() -> None:
    """An "owner/repo" string splits into owner and name."""
    ref = parse_repo_ref("pingcap/parser")

    assert ref == RepoRef(owner="pingcap", name="parser")
    assert ref.full_name == "pingcap/parser"
    assert str(ref) == "pingcap/parser"


@pytest.mark.parametrize("raw", ["pingcap", "", "/parser", "pingcap/", "a/b/c"])
def test_parse_repo_ref_rejects_malformed(raw: str) -> None:
    """Anything but two non-empty segments is rejected."""
    with pytest.raises(MalformedReferenceError) as exc_info:
        parse_repo_ref(raw)

    assert exc_info.value.code == "MALFORMED_REFERENCE"
    assert exc_info.value.raw == raw


def test_parse_project_ref() -> None:
    """A board URL yields owner, repository and board number, with no id yet."""
    ref = parse_project_ref("https://github.com/pingcap/tidb/projects/40")

    assert ref == ProjectRef(owner="pingcap", name="tidb", number=40)
    assert ref.id is None
    assert ref.repo == RepoRef("pingcap", "tidb")
    assert str(ref) == "pingcap/tidb#40"


def test_parse_project_ref_accepts_dashes_and_dots() -> None:
    """Dashes, dots and underscores are valid in owner and repository names."""
    ref = parse_project_ref("https://github.com/tikv/pd-client.rs/projects/3")

    assert (ref.owner, ref.name, ref.number) == ("tikv", "pd-client.rs", 3)


@pytest.mark.parametrize(
    "raw",
    [
        "not a url",
        "https://github.com/pingcap/tidb",
        "https://github.com/pingcap/tidb/projects/",
        "https://github.com/orgs/pingcap/projects",
    ],
)
def test_parse_project_ref_unrecognised_is_empty(raw: str) -> None:
    """URLs that do not name a board give the empty sentinel."""
    ref = parse_project_ref(raw)

    assert ref.is_empty
    assert ref == ProjectRef.empty()


def test_parse_project_ref_strict_raises() -> None:
    """In strict mode an unrecognised URL is an error."""
    with pytest.raises(MalformedReferenceError):
        parse_project_ref("https://github.com/pingcap/tidb", strict=True)


def test_select_projects_drops_boards_of_watched_repos() -> None:
    """Boards of repositories that are watched directly are not listed again."""
    repos = [parse_repo_ref("pingcap/parser")]
    projects = [
        parse_project_ref("https://github.com/pingcap/tidb/projects/40"),
        parse_project_ref("https://github.com/pingcap/parser/projects/1"),
    ]

    selected = select_projects(repos, projects)

    assert selected == [ProjectRef("pingcap", "tidb", 40)]


@given(owner=name_strategy, name=name_strategy)
@settings(max_examples=100)
def test_repo_ref_parses_its_own_full_name(owner: str, name: str) -> None:
    """
    Property: parse_repo_ref inverts RepoRef.full_name.

    For any valid owner and name, parsing the full name gives the same ref.
    """
    ref = RepoRef(owner, name)

    assert parse_repo_ref(ref.full_name) == ref


@given(owner=name_strategy, name=name_strategy, number=st.integers(min_value=1, max_value=10**6))
@settings(max_examples=100)
def test_project_url_components_recovered(owner: str, name: str, number: int) -> None:
    """
    Property: every component of a board URL is recovered.

    For any owner, name and number, the parsed ref carries exactly those values.
    """
    ref = parse_project_ref(f"https://github.com/{owner}/{name}/projects/{number}")

    assert (ref.owner, ref.name, ref.number, ref.id) == (owner, name, number, None)
    assert not ref.is_empty


@given(
    repos=st.lists(st.tuples(name_strategy, name_strategy), max_size=5),
    projects=st.lists(
        st.tuples(name_strategy, name_strategy, st.integers(min_value=1, max_value=99)),
        max_size=8,
    ),
)
@settings(max_examples=100)
def test_select_projects_keeps_order_and_excludes_watched(
    repos: list[tuple[str, str]], projects: list[tuple[str, str, int]]
) -> None:
    """
    Property: selection is an order-preserving filter.

    No selected board belongs to a watched repository, and every board of an
    unwatched repository is kept in its original position.
    """
    repo_refs = [RepoRef(o, n) for o, n in repos]
    project_refs = [ProjectRef(o, n, k) for o, n, k in projects]

    selected = select_projects(repo_refs, project_refs)

    assert all(p.repo not in repo_refs for p in selected)
    assert selected == [p for p in project_refs if p.repo not in repo_refs]
