import pytest

from boxexplorer.core.page import PageModel, PageTextLayer, Rect
from boxexplorer.core.virtualization import (
    PageVirtualizer,
    ScaleMode,
    ViewMode,
    clamp_manual_scale,
    compute_fit_width_scale,
)

from conftest import make_glyph


class FakeReader:
    def __init__(self, page_count=5, size=(600.0, 800.0)):
        self.page_count = page_count
        self.size = size

    def get_page_count(self):
        return self.page_count

    def get_page_size(self, page):
        return self.size


class FakeRenderer:
    def __init__(self):
        self.calls = []

    def __call__(self, reader, page, scale, invert=False):
        self.calls.append((page, scale))
        glyphs = [make_glyph(page, 0, "x", x=0, y=0)]
        return PageModel(page, scale, None, PageTextLayer(page, glyphs))


@pytest.fixture
def renderer():
    return FakeRenderer()


def _virtualizer(renderer, mode=ViewMode.SCROLL, page_count=5):
    virtualizer = PageVirtualizer(FakeReader(page_count), renderer=renderer)
    virtualizer.mode = mode
    virtualizer.viewer_width = 1000
    return virtualizer


def test_fit_width_scale():
    assert compute_fit_width_scale(600, 1000) == pytest.approx(1.5)
    assert compute_fit_width_scale(400, 300) == pytest.approx(0.8)
    assert compute_fit_width_scale(0, 1000) == 1.0


def test_manual_scale_is_clamped():
    assert clamp_manual_scale(0.1) == 0.5
    assert clamp_manual_scale(9) == 4.0
    assert clamp_manual_scale(1.3) == 1.3


def test_single_mode_materializes_current_page_only(qapp, renderer):
    virtualizer = _virtualizer(renderer, ViewMode.SINGLE)
    virtualizer.rebuild(3)

    assert renderer.calls == [(3, pytest.approx(1.5))]
    assert virtualizer.rendered_pages() == [3]
    assert virtualizer.ensure_materialized(2) is None
    assert virtualizer.update_visibility(0, 600) == []


def test_manual_scale_mode(qapp, renderer):
    virtualizer = _virtualizer(renderer, ViewMode.SINGLE)
    virtualizer.scale_mode = ScaleMode.MANUAL
    virtualizer.manual_scale = 7
    virtualizer.rebuild(1)

    assert virtualizer.scale == 4.0


def test_scroll_mode_lays_out_placeholders(qapp, renderer):
    virtualizer = _virtualizer(renderer)
    virtualizer.rebuild(1)

    slots = virtualizer.slots()
    assert len(slots) == 5
    assert renderer.calls == []
    assert (slots[0].width, slots[0].height) == (900, 1200)
    assert [s.top for s in slots[:3]] == [0, 1232, 2464]


def test_visibility_materializes_each_page_once(qapp, renderer):
    virtualizer = _virtualizer(renderer)
    virtualizer.rebuild(1)

    assert virtualizer.update_visibility(0, 600) == [1]
    assert virtualizer.update_visibility(0, 600) == []
    assert virtualizer.update_visibility(1232, 600) == [2]
    assert [call[0] for call in renderer.calls] == [1, 2]


def test_visibility_threshold(qapp, renderer):
    virtualizer = _virtualizer(renderer)
    virtualizer.rebuild(1)

    # expanded window ends 100px into page 2
    assert virtualizer.update_visibility(0, 932) == [1]
    # 180px is 15% of the page height
    assert virtualizer.update_visibility(0, 1012) == [2]


def test_forced_materialization(qapp, renderer):
    virtualizer = _virtualizer(renderer)
    virtualizer.rebuild(1)

    model = virtualizer.ensure_materialized(4)
    assert model.page == 4
    assert virtualizer.ensure_materialized(4) is model
    assert len(renderer.calls) == 1
    assert 4 not in virtualizer.update_visibility(3696, 600)


def test_rebuild_starts_a_new_generation(qapp, renderer):
    virtualizer = _virtualizer(renderer)
    virtualizer.rebuild(1)
    virtualizer.update_visibility(0, 600)
    generation = virtualizer.generation

    virtualizer.rebuild(1)
    assert virtualizer.generation == generation + 1
    assert virtualizer.rendered_pages() == []


def test_page_at_scroll_uses_anchor_offset(qapp, renderer):
    virtualizer = _virtualizer(renderer)
    virtualizer.rebuild(1)

    assert virtualizer.page_at_scroll(0) == 1
    assert virtualizer.page_at_scroll(1207) == 1
    assert virtualizer.page_at_scroll(1208) == 2


def test_rect_query_is_offset_into_content_space(qapp, renderer):
    virtualizer = _virtualizer(renderer)
    virtualizer.rebuild(1)
    virtualizer.ensure_materialized(2)

    (glyph, rect), = list(virtualizer.glyphs_in_rect(Rect(40, 1220, 70, 1240)))
    assert glyph.page == 2
    assert (rect.left, rect.top) == (50, 1232)
    assert virtualizer.glyph_at(55, 1235) is glyph
    assert virtualizer.glyph_at(5, 1235) is None

    # Touching the right edge only
    assert list(virtualizer.glyphs_in_rect(Rect(60, 1232, 80, 1240))) == []
    # Page 1 is still a placeholder
    assert list(virtualizer.glyphs_in_rect(Rect(0, 0, 1000, 1200))) == []


def test_empty_document(qapp, renderer):
    virtualizer = _virtualizer(renderer, page_count=0)
    virtualizer.rebuild(1)
    assert virtualizer.slots() == []
    assert virtualizer.content_height == 0
