from boxexplorer.core.page import Rect
from boxexplorer.core.selection import DragGesture, SelectionManager

from conftest import make_glyph


def _pairs(glyphs):
    return [(g, g.bbox.rect) for g in glyphs]


def test_toggle_adds_then_removes(qapp):
    manager = SelectionManager()
    glyph = make_glyph(1, 3)
    changes = []
    manager.selection_changed.connect(lambda: changes.append(1))

    assert manager.toggle(glyph) is True
    assert manager.is_selected(1, 3)
    assert manager.toggle(glyph) is False
    assert manager.count == 0
    assert len(changes) == 2


def test_rect_selection_is_strict_and_replaces(qapp):
    manager = SelectionManager()
    glyphs = [make_glyph(1, i, x=i * 10) for i in range(3)]
    manager.toggle(make_glyph(2, 7))

    # right edge touches glyph 2 only at x=20
    count = manager.select_in_rect(Rect(0, 0, 20, 10), _pairs(glyphs))

    assert count == 2
    assert manager.selected_ids(1) == [0, 1]
    assert not manager.is_selected(2, 7)


def test_rect_selection_is_idempotent(qapp):
    manager = SelectionManager()
    glyphs = [make_glyph(1, i, x=i * 10) for i in range(4)]
    rect = Rect(5, 2, 25, 8)

    manager.select_in_rect(rect, _pairs(glyphs))
    first = manager.signature()
    manager.select_in_rect(rect, _pairs(glyphs))

    assert manager.signature() == first == "1-0|1-1|1-2"


def test_signature_ignores_insertion_order(qapp):
    manager = SelectionManager()
    manager.toggle(make_glyph(2, 5))
    manager.toggle(make_glyph(1, 3))

    assert manager.signature() == "1-3|2-5"
    assert manager.pages() == [1, 2]


def test_sorted_entries_follow_page_then_position(qapp):
    manager = SelectionManager()
    manager.toggle(make_glyph(2, 0, "c", x=0, y=0))
    manager.toggle(make_glyph(1, 1, "b", x=30, y=0))
    manager.toggle(make_glyph(1, 0, "a", x=10, y=0))

    assert [e.char for e in manager.sorted_entries()] == ["a", "b", "c"]


def test_clear_emits_only_when_something_was_selected(qapp):
    manager = SelectionManager()
    cleared = []
    manager.selection_cleared.connect(lambda: cleared.append(1))

    manager.clear()
    assert cleared == []

    manager.toggle(make_glyph(1, 0))
    manager.clear()
    assert cleared == [1]
    assert manager.signature() == ""


def test_drag_starts_only_past_threshold():
    gesture = DragGesture(100, 100)

    assert gesture.move(102, 102) is False
    assert gesture.rect is None
    assert gesture.move(103, 102) is True
    assert gesture.rect == Rect(100, 100, 103, 102)
    # stays a drag once started
    assert gesture.move(100, 100) is True


def test_drag_rect_is_normalized():
    gesture = DragGesture(50, 50)
    gesture.move(10, 20)
    assert gesture.rect == Rect(10, 20, 50, 50)
