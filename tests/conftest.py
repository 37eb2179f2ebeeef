"""Shared test fixtures and utilities."""

from types import SimpleNamespace

import pytest

from git_dom.backend import CommitSummary, DiffKind, HeadState, SubmoduleEntry
from git_dom.status_flags import FileStatus

from tests.fixtures.fake_backend import FakeBackend, FakeRepository
from tests.fixtures.git_repos import commit_file, init_repo, record_submodules

FOO_TIP = "a1b2c3d4e5f60718293a4b5c6d7e8f9012345678"
FOO_UPSTREAM = "0f1e2d3c4b5a69788796a5b4c3d2e1f012345678"


@pytest.fixture
def workspace(tmp_path):
    """Resolved tmp_path so discovered paths compare equal."""
    return tmp_path.resolve()


@pytest.fixture
def fake_project(workspace):
    """Parent with a checked-out ``libs/foo`` and an absent ``vendor/bar``.

    libs/foo is on main, 2 commits ahead of origin/main, with one modified
    tracked file and no pending pointer change in the parent.
    """
    foo_dir = workspace / "libs" / "foo"
    foo_dir.mkdir(parents=True)

    parent = FakeRepository(
        workspace,
        submodules=[
            SubmoduleEntry("libs/foo", "libs/foo", "https://example.com/foo.git"),
            SubmoduleEntry("vendor/bar", "vendor/bar", "https://example.com/bar.git"),
        ],
        index={"libs/foo": FOO_TIP},
    )
    foo = FakeRepository(
        foo_dir,
        head=HeadState(branch="main", target=FOO_TIP),
        commit=CommitSummary(FOO_TIP, "Add widget support"),
        statuses={"widget.py": FileStatus.WT_MODIFIED},
        refs={"refs/remotes/origin/main": FOO_UPSTREAM},
        divergence=(2, 0),
    )
    backend = FakeBackend([parent, foo])
    return SimpleNamespace(root=workspace, parent=parent, foo=foo, backend=backend)


@pytest.fixture
def git_project(workspace):
    """Real parent repository with submodules, built with pygit2.

    libs/foo is checked out on main, clean, 2 commits ahead of
    origin/main, and its tip is the commit the parent records.
    vendor/bar is recorded in the parent but absent from disk.
    """
    root = workspace / "parent"
    parent = init_repo(root)
    commit_file(parent, "README.md", "parent\n", "Initial parent")

    nested = init_repo(root / "libs" / "foo")
    base = commit_file(nested, "foo.txt", "one\n", "Initial foo")
    nested.references.create("refs/remotes/origin/main", base)
    commit_file(nested, "foo.txt", "two\n", "Second foo")
    tip = commit_file(nested, "foo.txt", "three\n", "Third foo\n\nWith a body.\n")

    record_submodules(
        parent,
        pointers={"libs/foo": tip, "vendor/bar": base},
        urls={
            "libs/foo": "https://example.com/foo.git",
            "vendor/bar": "https://example.com/bar.git",
        },
    )
    return SimpleNamespace(root=root, parent=parent, nested=nested, base=base, tip=tip)


def changes(staged=(), unstaged=()):
    """Build a ``changes`` mapping for FakeRepository."""
    return {DiffKind.STAGED: set(staged), DiffKind.UNSTAGED: set(unstaged)}
