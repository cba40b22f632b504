"""Tests for commit classification against destination refs."""

import pytest
from conftest import FakeRunner, grep_query, message_query

from branchtriage_core.classifier import (
    TriageContext,
    classify_line,
    classify_lines,
    is_commit_chore,
    is_line_ui,
    is_release_tag,
)

HASH = "abc123456"


def _context(*destinations, colors=None):
    return TriageContext(source_ref="main", destination_refs=list(destinations), ref_colors=colors or {})


class TestPredicates:
    @pytest.mark.parametrize("line", ["o", "o merge ui marker", " /", "|\\", "| o  abc", "|\\|"])
    def test_graph_marks_are_ui(self, line):
        assert is_line_ui(line)

    @pytest.mark.parametrize("line", [f"< {HASH} fix: x", f"* {HASH} fix: x", f"{HASH} fix: x"])
    def test_commit_lines_are_not_ui(self, line):
        assert not is_line_ui(line)

    @pytest.mark.parametrize(
        "message",
        [
            "Merge branch 'main' into next",
            "chore: update yarn.lock",
            "Version docs",
            "chore: update all contributors",
        ],
    )
    def test_chores(self, message):
        assert is_commit_chore(message)

    def test_regular_commit_is_not_chore(self):
        assert not is_commit_chore("fix(cli): handle missing config (#42)")

    @pytest.mark.parametrize("message", ["v3.6.0", "v10.12.3"])
    def test_release_tags(self, message):
        assert is_release_tag(message)

    @pytest.mark.parametrize("message", ["v3.6", "v3.6.0-rc.1", "release v3.6.0", "3.6.0"])
    def test_not_release_tags(self, message):
        assert not is_release_tag(message)


class TestClassifyLine:
    def test_ui_line_never_queries_git(self):
        runner = FakeRunner()
        commit = classify_line(runner, "|\\", _context("next"))
        assert commit.type == "ui"
        assert commit.ref == "main"
        assert commit.pretty.startswith("[dim]")
        assert runner.calls == []

    def test_line_without_hash_is_ui(self):
        runner = FakeRunner()
        commit = classify_line(runner, "| |", _context("next"))
        assert commit.type == "ui"
        assert runner.calls == []

    def test_chore_wins_over_ref_membership(self):
        runner = FakeRunner(
            {
                message_query(HASH): "chore: update yarn.lock\n",
                grep_query("next", "chore: update yarn.lock"): f"{HASH} chore: update yarn.lock\n",
            }
        )
        commit = classify_line(runner, f"< {HASH} chore: update yarn.lock", _context("next"))
        assert commit.type == "chore"
        assert commit.ref == "main"
        assert runner.called("git", "log", "next") == []

    def test_release_tag_becomes_its_own_ref(self):
        runner = FakeRunner({message_query(HASH): "v3.6.0\n"})
        commit = classify_line(runner, f"< {HASH} v3.6.0", _context("next"))
        assert commit.type == "tag"
        assert commit.ref == "v3.6.0"

    def test_commit_found_in_destination(self):
        runner = FakeRunner(
            {
                message_query(HASH): "fix: notes formatting (#42)",
                grep_query("next", "fix: notes formatting (#42)"): "def456789 fix: notes formatting (#42)\n",
            }
        )
        commit = classify_line(runner, f"{HASH} fix: notes formatting (#42)", _context("next"))
        assert commit.type == "commit"
        assert commit.ref == "next"
        assert commit.hash == HASH
        assert commit.pr == "42"
        assert commit.pretty.startswith("[dim blue]")

    def test_commit_not_in_destination_keeps_source_ref(self):
        runner = FakeRunner({message_query(HASH): "feat: new thing"})
        commit = classify_line(runner, f"< {HASH} feat: new thing", _context("next"))
        assert commit.type == "commit"
        assert commit.ref == "main"
        assert commit.pretty == f"< {HASH} feat: new thing"

    def test_brackets_are_escaped_in_grep_pattern(self):
        runner = FakeRunner(
            {
                message_query(HASH): "fix: docs [skip ci]",
                grep_query("next", "fix: docs \\[skip ci\\]"): "def456789 fix: docs [skip ci]\n",
            }
        )
        commit = classify_line(runner, f"< {HASH} fix: docs [skip ci]", _context("next"))
        assert commit.ref == "next"

    def test_last_matching_destination_wins(self):
        runner = FakeRunner(
            {
                message_query(HASH): "fix: x",
                grep_query("v3.4.1", "fix: x"): "aaa111111 fix: x\n",
                grep_query("v3.5.0", "fix: x"): "bbb222222 fix: x\n",
            }
        )
        context = _context("v3.4.1", "v3.4.2", "v3.5.0", colors={"v3.5.0": "#aabbcc"})
        commit = classify_line(runner, f"< {HASH} fix: x", context)
        assert commit.ref == "v3.5.0"
        assert commit.pretty.startswith("[dim #aabbcc]")
        # Every destination is checked, even after a match.
        assert len(runner.called("git", "log", "v3.4.1")) == 1
        assert len(runner.called("git", "log", "v3.4.2")) == 1
        assert len(runner.called("git", "log", "v3.5.0")) == 1

    def test_classify_line_does_not_mutate_context(self):
        runner = FakeRunner({message_query(HASH): "feat: y"})
        context = _context("next")
        classify_line(runner, f"< {HASH} feat: y", context)
        assert context.source_ref == "main"
        assert context.destination_refs == ["next"]


class TestScenarioA:
    def test_commit_in_next_and_ui_marker(self):
        runner = FakeRunner(
            {
                message_query(HASH): "fix: notes formatting (#42)\n",
                grep_query("next", "fix: notes formatting (#42)"): "fed987654 fix: notes formatting (#42)\n",
            }
        )
        lines = ["abc123456 fix: notes formatting (#42)", "o merge ui marker"]

        first, second = classify_lines(runner, lines, _context("next"))

        assert (first.type, first.ref) == ("commit", "next")
        assert second.type == "ui"
        assert [c for c in runner.calls if "merge ui marker" in " ".join(c)] == []
