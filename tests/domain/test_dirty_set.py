from __future__ import annotations

from multisave.domain.dirty_set import DirtySet


def test_mark_dirty_is_idempotent() -> None:
    once = DirtySet()
    once.mark_dirty("x")
    twice = DirtySet()
    twice.mark_dirty("x")
    twice.mark_dirty("x")

    assert once.ids() == twice.ids() == ("x",)
    assert len(twice) == 1


def test_mark_clean_on_absent_id_is_noop() -> None:
    dirty = DirtySet(["a"])

    dirty.mark_clean("missing")

    assert dirty.ids() == ("a",)


def test_is_dirty_tracks_membership() -> None:
    dirty = DirtySet()
    assert dirty.is_dirty() is False

    dirty.mark_dirty("a")
    assert dirty.is_dirty() is True

    dirty.mark_clean("a")
    assert dirty.is_dirty() is False


def test_report_maps_flag_to_mark_calls() -> None:
    dirty = DirtySet()

    dirty.report("a", True)
    dirty.report("b", True)
    dirty.report("a", False)

    assert dirty.ids() == ("b",)
    assert "a" not in dirty
    assert "b" in dirty


def test_reset_all_empties_the_set() -> None:
    dirty = DirtySet(["a", "b"])

    dirty.reset_all()

    assert dirty.ids() == ()


def test_ids_snapshot_is_unaffected_by_later_edits() -> None:
    dirty = DirtySet(["a", "b"])
    snapshot = dirty.ids()

    dirty.mark_dirty("c")
    dirty.mark_clean("a")

    assert snapshot == ("a", "b")
    assert dirty.ids() == ("b", "c")


def test_mark_many_clean_keeps_unlisted_ids() -> None:
    dirty = DirtySet(["a", "b", "c"])

    dirty.mark_many_clean(["a", "c", "unknown"])

    assert dirty.ids() == ("b",)
