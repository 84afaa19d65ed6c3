"""Tests for byte-range edit application and write-back."""

import pytest

from arkmod.exceptions import EditOverlapError
from arkmod.schemas import EditOp
from arkmod.transform.editor import (
    EditCommitter,
    apply_edits,
    atomic_write,
    content_hash,
    ordered_edits,
    read_source,
    write_back,
)

pytestmark = pytest.mark.fast


class TestEditOp:
    def test_insertion_is_zero_width(self):
        assert EditOp(start=3, end=3, text="x").is_insertion
        assert not EditOp(start=3, end=4, text="x").is_insertion

    def test_negative_offsets_rejected(self):
        with pytest.raises(ValueError):
            EditOp(start=-1, end=2, text="")

    def test_adjacent_ranges_do_not_overlap(self):
        assert not EditOp(start=0, end=3, text="a").overlaps(EditOp(start=3, end=5, text="b"))

    def test_nested_ranges_overlap(self):
        assert EditOp(start=0, end=10, text="a").overlaps(EditOp(start=2, end=4, text="b"))

    def test_two_insertions_at_same_point_overlap(self):
        assert EditOp(start=5, end=5, text="a").overlaps(EditOp(start=5, end=5, text="b"))

    def test_insertion_at_range_start_is_allowed(self):
        assert not EditOp(start=5, end=5, text="a").overlaps(EditOp(start=5, end=8, text="b"))


class TestApplyEdits:
    def test_edits_applied_in_position_order(self):
        data = b"new RegExp(a); new RegExp(b);"
        edits = [
            EditOp(start=15, end=28, text="regex(b)"),
            EditOp(start=0, end=13, text="regex(a)"),
        ]
        assert apply_edits(data, edits) == b"regex(a); regex(b);"

    def test_insertion_and_replacement(self):
        data = b"x = f();\n"
        edits = [EditOp(start=0, end=0, text="// note\n"), EditOp(start=4, end=7, text="g()")]
        assert apply_edits(data, edits) == b"// note\nx = g();\n"

    def test_multibyte_offsets_are_bytes(self):
        data = "const s = \"é\"; f();".encode("utf-8")
        start = data.index(b"f()")
        result = apply_edits(data, [EditOp(start=start, end=start + 3, text="g()")])
        assert result.decode("utf-8") == "const s = \"é\"; g();"

    def test_window_limits_output(self):
        data = b"0123456789"
        assert apply_edits(data, [EditOp(start=4, end=5, text="X")], start=2, end=7) == b"23X56"

    def test_edit_outside_window_rejected(self):
        with pytest.raises(ValueError):
            apply_edits(b"0123456789", [EditOp(start=0, end=1, text="X")], start=2, end=7)

    def test_overlap_raises(self):
        edits = [EditOp(start=0, end=5, text="a"), EditOp(start=3, end=8, text="b")]
        with pytest.raises(EditOverlapError) as exc_info:
            ordered_edits(edits)
        assert exc_info.value.first.start == 0
        assert exc_info.value.second.start == 3


class TestEditCommitter:
    def test_empty_commit_is_none(self):
        assert EditCommitter().commit(b"abc") is None

    def test_commit_decodes(self):
        committer = EditCommitter()
        committer.add(EditOp(start=0, end=1, text="A"))
        committer.add(EditOp(start=2, end=3, text="C"))
        assert committer.commit(b"abc") == "AbC"

    def test_edits_returns_copy(self):
        committer = EditCommitter()
        committer.add(EditOp(start=0, end=0, text="x"))
        committer.edits.clear()
        assert committer.edits == [EditOp(start=0, end=0, text="x")]


class TestWriteBack:
    def test_atomic_write_keeps_crlf(self, tmp_path):
        target = tmp_path / "a.ts"
        assert atomic_write(str(target), "x;\r\ny;\r\n")
        assert target.read_bytes() == b"x;\r\ny;\r\n"
        assert read_source(str(target)) == "x;\r\ny;\r\n"

    def test_atomic_write_leaves_no_temp_files(self, tmp_path):
        target = tmp_path / "a.ts"
        target.write_text("old", encoding="utf-8")
        assert atomic_write(str(target), "new")
        assert [p.name for p in tmp_path.iterdir()] == ["a.ts"]
        assert target.read_text(encoding="utf-8") == "new"

    def test_atomic_write_missing_directory(self, tmp_path):
        assert not atomic_write(str(tmp_path / "missing" / "a.ts"), "x")

    def test_write_back_when_unchanged(self, tmp_path):
        target = tmp_path / "a.ts"
        target.write_text("old", encoding="utf-8")
        assert write_back(str(target), "old", "new")
        assert target.read_text(encoding="utf-8") == "new"

    def test_write_back_refuses_concurrent_change(self, tmp_path):
        target = tmp_path / "a.ts"
        target.write_text("changed elsewhere", encoding="utf-8")
        assert not write_back(str(target), "old", "new")
        assert target.read_text(encoding="utf-8") == "changed elsewhere"

    def test_content_hash_is_stable(self):
        assert content_hash("abc") == content_hash("abc")
        assert content_hash("abc") != content_hash("abd")
