"""Tests against real repositories built with pygit2."""

import pygit2
import pytest
from pygit2.enums import FileMode, ResetMode

from git_dom.backend import DiffKind
from git_dom.errors import (
    BareRepositoryError,
    DiffUnavailableError,
    NotARepositoryError,
    SubmoduleOpenError,
)
from git_dom.pygit2_backend import Pygit2Backend, Pygit2Repository, to_file_status
from git_dom.status_flags import FileStatus
from git_dom.submodule_state import discover

from tests.fixtures.git_repos import init_repo, write_file


def _discover(project, name=None):
    return discover(Pygit2Repository(project.parent), name)


def _foo(project):
    return _discover(project, "libs/foo")[0]


def _stage_pointer(repo, path, oid):
    index = repo.index
    index.add(pygit2.IndexEntry(path, oid, FileMode.COMMIT))
    index.write()


class TestToFileStatus:
    """Native flag translation."""

    def test_current(self):
        assert to_file_status(0) == FileStatus.CURRENT

    def test_combined_flags(self):
        native = pygit2.enums.FileStatus.INDEX_NEW | pygit2.enums.FileStatus.WT_MODIFIED
        assert to_file_status(int(native)) == FileStatus.INDEX_NEW | FileStatus.WT_MODIFIED

    def test_untracked(self):
        assert to_file_status(int(pygit2.enums.FileStatus.WT_NEW)) == FileStatus.WT_NEW


class TestPygit2Backend:
    """Opening and discovering repositories."""

    def test_discover_from_subdirectory(self, git_project):
        (git_project.root / "docs").mkdir()
        handle = Pygit2Backend().discover(git_project.root / "docs")
        assert handle.workdir == git_project.root

    def test_discover_outside_repository(self, workspace):
        (workspace / "elsewhere").mkdir()
        with pytest.raises(NotARepositoryError):
            Pygit2Backend().discover(workspace / "elsewhere")

    def test_open_does_not_search_upwards(self, git_project):
        (git_project.root / "docs").mkdir()
        with pytest.raises(NotARepositoryError):
            Pygit2Backend().open(git_project.root / "docs")

    def test_open_exact_path(self, git_project):
        handle = Pygit2Backend().open(git_project.root / "libs" / "foo")
        assert handle.workdir == git_project.root / "libs" / "foo"


class TestPygit2Repository:
    """Individual read queries."""

    def test_submodule_entries(self, git_project):
        entries = Pygit2Repository(git_project.parent).submodules()
        assert [(e.name, e.path, e.url) for e in entries] == [
            ("libs/foo", "libs/foo", "https://example.com/foo.git"),
            ("vendor/bar", "vendor/bar", "https://example.com/bar.git"),
        ]

    def test_head_on_branch(self, git_project):
        head = Pygit2Repository(git_project.nested).head()
        assert head.branch == "main"
        assert head.target == str(git_project.tip)

    def test_head_of_empty_repository(self, workspace):
        head = Pygit2Repository(init_repo(workspace / "empty")).head()
        assert head.is_unborn
        assert head.branch is None

    def test_head_commit_summary_is_first_line(self, git_project):
        commit = Pygit2Repository(git_project.nested).head_commit()
        assert commit.id == str(git_project.tip)
        assert commit.summary == "Third foo"

    def test_resolve_missing_reference(self, git_project):
        handle = Pygit2Repository(git_project.nested)
        assert handle.resolve_reference("refs/remotes/origin/nope") is None
        assert handle.resolve_reference("refs/remotes/origin/main") == str(git_project.base)

    def test_config_value(self, git_project):
        git_project.parent.config["dom.root"] = "lib"
        handle = Pygit2Repository(git_project.parent)
        assert handle.config_value("dom.root") == "lib"
        assert handle.config_value("dom.commit") is None

    def test_index_entry_id(self, git_project):
        handle = Pygit2Repository(git_project.parent)
        assert handle.index_entry_id("libs/foo") == str(git_project.tip)
        assert handle.index_entry_id("nope") is None

    def test_staged_changes_with_unborn_head(self, workspace):
        repo = init_repo(workspace / "fresh")
        write_file(repo, "a.txt", "a\n")
        repo.index.add("a.txt")
        repo.index.write()
        handle = Pygit2Repository(repo)
        assert handle.has_changes(DiffKind.STAGED, "a.txt") is True
        assert handle.has_changes(DiffKind.STAGED, "b.txt") is False

    def test_clean_submodule_has_no_pointer_change(self, git_project):
        handle = Pygit2Repository(git_project.parent)
        assert handle.has_changes(DiffKind.STAGED, "libs/foo") is False
        assert handle.has_changes(DiffKind.UNSTAGED, "libs/foo") is False

    def test_dirty_nested_tree_is_not_a_pointer_change(self, git_project):
        write_file(git_project.nested, "foo.txt", "a longer modification\n")
        write_file(git_project.nested, "notes.txt", "scratch\n")
        handle = Pygit2Repository(git_project.parent)
        assert handle.has_changes(DiffKind.STAGED, "libs/foo") is False
        assert handle.has_changes(DiffKind.UNSTAGED, "libs/foo") is False

    def test_staged_gitlink_change(self, git_project):
        _stage_pointer(git_project.parent, "libs/foo", git_project.base)
        handle = Pygit2Repository(git_project.parent)
        assert handle.has_changes(DiffKind.STAGED, "libs/foo") is True

    def test_moved_nested_head_is_unstaged_change(self, git_project):
        git_project.nested.reset(git_project.base, ResetMode.HARD)
        handle = Pygit2Repository(git_project.parent)
        assert handle.has_changes(DiffKind.STAGED, "libs/foo") is False
        assert handle.has_changes(DiffKind.UNSTAGED, "libs/foo") is True

    def test_unknown_submodule_path(self, git_project):
        with pytest.raises(DiffUnavailableError):
            Pygit2Repository(git_project.parent).has_changes(DiffKind.UNSTAGED, "nope")


class TestDiscoverRealRepository:
    """Aggregation over a real parent and nested checkout."""

    def test_clean_checked_out_submodule(self, git_project):
        foo = _foo(git_project)
        assert foo.branch == "main"
        assert foo.detached is False
        assert foo.head_commit == str(git_project.tip)[:7]
        assert foo.head_message == "Third foo"
        assert (foo.ahead, foo.behind) == (2, 0)
        assert (foo.staged, foo.modified, foo.untracked) == (0, 0, 0)
        assert foo.is_dirty is False
        assert foo.parent_changed is False

    def test_absent_submodule(self, git_project):
        bar = _discover(git_project, "vendor/bar")[0]
        assert bar.branch is None
        assert bar.head_commit is None
        assert bar.head_message is None
        assert (bar.staged, bar.modified, bar.untracked) == (0, 0, 0)

    def test_all_submodules_in_order(self, git_project):
        assert [info.name for info in _discover(git_project)] == ["libs/foo", "vendor/bar"]

    def test_filter_without_match(self, git_project):
        assert _discover(git_project, "nope") == []

    def test_modified_file(self, git_project):
        write_file(git_project.nested, "foo.txt", "a longer modification\n")
        foo = _foo(git_project)
        assert (foo.staged, foo.modified, foo.untracked) == (0, 1, 0)
        assert foo.is_dirty is True
        assert foo.parent_changed is False

    def test_untracked_file(self, git_project):
        write_file(git_project.nested, "notes.txt", "scratch\n")
        foo = _foo(git_project)
        assert (foo.staged, foo.modified, foo.untracked) == (0, 0, 1)
        assert foo.is_dirty is False
        assert foo.parent_changed is False

    def test_staged_file(self, git_project):
        write_file(git_project.nested, "new.txt", "new\n")
        index = git_project.nested.index
        index.add("new.txt")
        index.write()
        foo = _foo(git_project)
        assert (foo.staged, foo.modified, foo.untracked) == (1, 0, 0)
        assert foo.is_dirty is True
        assert foo.parent_changed is False

    def test_detached_head(self, git_project):
        git_project.nested.set_head(git_project.tip)
        foo = _foo(git_project)
        assert foo.branch == str(git_project.tip)[:7]
        assert foo.detached is True
        assert (foo.ahead, foo.behind) == (0, 0)

    def test_missing_upstream(self, git_project):
        git_project.nested.references.delete("refs/remotes/origin/main")
        foo = _foo(git_project)
        assert (foo.ahead, foo.behind) == (0, 0)

    def test_pointer_moved_in_working_tree(self, git_project):
        git_project.nested.reset(git_project.base, ResetMode.HARD)
        foo = _foo(git_project)
        assert foo.head_commit == str(git_project.base)[:7]
        assert (foo.ahead, foo.behind) == (0, 0)
        assert foo.parent_changed is True

    def test_pointer_staged_in_parent(self, git_project):
        _stage_pointer(git_project.parent, "libs/foo", git_project.base)
        foo = _foo(git_project)
        assert foo.head_commit == str(git_project.tip)[:7]
        assert (foo.staged, foo.modified, foo.untracked) == (0, 0, 0)
        assert foo.parent_changed is True

    def test_libs_foo_scenario(self, git_project):
        write_file(git_project.nested, "foo.txt", "a longer modification\n")
        foo = _foo(git_project)
        assert foo.branch == "main"
        assert (foo.ahead, foo.behind) == (2, 0)
        assert (foo.staged, foo.modified, foo.untracked) == (0, 1, 0)
        assert foo.is_dirty is True
        assert foo.parent_changed is False

    def test_bare_parent(self, workspace):
        bare = init_repo(workspace / "bare.git", bare=True)
        with pytest.raises(BareRepositoryError):
            discover(Pygit2Repository(bare))

    def test_empty_submodule_directory(self, git_project):
        (git_project.root / "vendor" / "bar").mkdir(parents=True)
        with pytest.raises(SubmoduleOpenError) as excinfo:
            _discover(git_project)
        assert excinfo.value.name == "vendor/bar"
