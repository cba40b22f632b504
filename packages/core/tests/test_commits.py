"""Tests for commit line parsing and message sanitising."""

import pytest

from branchtriage_core.commits import CommitRecord, decorate, parse_commit, sanitize_message

FULL_HASH = "0bb0f8ce075ea1e0f6a7851d80df2bc7d303e756"


class TestParseCommit:
    def test_short_hash_and_message(self):
        commit = parse_commit("abc123456 fix: notes formatting (#42)")
        assert commit.hash == "abc123456"
        assert commit.message == "fix: notes formatting (#42)"
        assert commit.pr == "42"

    def test_full_hash_with_graph_prefix(self):
        commit = parse_commit(f"< {FULL_HASH} chore(deps): update babel monorepo (#6779)")
        assert commit.hash == FULL_HASH
        assert commit.message == "chore(deps): update babel monorepo (#6779)"
        assert commit.pr == "6779"

    def test_no_pr_reference(self):
        commit = parse_commit(f"* {FULL_HASH} Version docs")
        assert commit.pr is None

    @pytest.mark.parametrize("line", ["", "|\\", " /", "| o", "merge ui marker"])
    def test_lines_without_hash_return_none(self, line):
        assert parse_commit(line) is None

    def test_hash_shorter_than_width_is_not_a_commit(self):
        assert parse_commit("abc1234 fix: short", hash_width=9) is None

    def test_configurable_hash_width(self):
        assert parse_commit(f"{FULL_HASH[:12]} fix: x", hash_width=12).hash == FULL_HASH[:12]
        assert parse_commit(f"{FULL_HASH[:10]} fix: x", hash_width=12) is None

    def test_first_pr_reference_wins(self):
        commit = parse_commit("abc123456 fix: thing (#12) follow-up of #7")
        assert commit.pr == "12"


class TestSanitizeMessage:
    def test_escapes_all_brackets(self):
        assert sanitize_message("fix: [skip ci] [docs]") == "fix: \\[skip ci\\] \\[docs\\]"

    def test_leaves_plain_message_alone(self):
        assert sanitize_message("fix(setup-auth): notes formatting") == "fix(setup-auth): notes formatting"


class TestCommitRecord:
    def test_pretty_defaults_to_escaped_line(self):
        record = CommitRecord(line="abc123456 fix: [skip ci]", ref="main")
        assert record.pretty == "abc123456 fix: \\[skip ci]"

    def test_decorate_wraps_in_style(self):
        assert decorate("abc", "dim red") == "[dim red]abc[/]"
        assert decorate("abc", "") == "abc"

    def test_dict_roundtrip(self):
        record = CommitRecord(line="l", ref="next", type="tag", hash="abc123456", message="v3.6.0", pr=None)
        assert CommitRecord.from_dict(record.to_dict()) == record
