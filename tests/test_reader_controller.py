import pytest

from boxexplorer.controllers import ReaderController
from boxexplorer.core.annotation import STATUS_SELECTION_CHANGED
from boxexplorer.core.document.pdf_reader import PDFDocumentReader
from boxexplorer.core.page import Rect, TextRun
from boxexplorer.core.virtualization import ViewMode
from boxexplorer.utils.settings_store import SettingsStore


class FakeReader:
    """In-memory stand-in for the PDF reader: one text run per page."""

    viewport_transform = staticmethod(PDFDocumentReader.viewport_transform)

    def __init__(self, pages):
        self.pages = pages
        self.loaded = False
        self.fingerprint = None

    def load_pdf(self, path):
        if path.endswith("missing.pdf"):
            return False, 0
        self.loaded = True
        self.fingerprint = "fp-" + path
        return True, len(self.pages)

    def close_document(self):
        self.loaded = False
        self.fingerprint = None

    def is_loaded(self):
        return self.loaded

    def get_page_count(self):
        return len(self.pages) if self.loaded else 0

    def get_page_size(self, page):
        return 600.0, 800.0

    def render_image(self, page, scale, invert=False):
        return None

    def get_text_runs(self, page):
        text = self.pages[page - 1]
        return [TextRun(text=text, transform=(1.0, 0.0, 0.0, 1.0, 0.0, 20.0), width=len(text) * 10.0, height=10.0)]


class Recorder:
    def __init__(self, signal):
        self.calls = []
        signal.connect(lambda *args: self.calls.append(args))

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def pdf_path(tmp_path):
    path = tmp_path / "paper.pdf"
    path.write_bytes(b"%PDF-1.4")
    return str(path)


@pytest.fixture
def controller(qapp, tmp_path):
    store = SettingsStore(tmp_path / "config")
    return ReaderController(store=store, reader=FakeReader(["xababx", "second", "third"]))


def test_open_restores_defaults_and_remembers_path(controller, pdf_path):
    pages = Recorder(controller.page_changed)

    assert controller.open_path(pdf_path) is True

    assert controller.has_document
    assert controller.current_page == 1
    assert pages.last == (1,)
    assert controller.zoom_label() == "Fit"
    assert controller.last_opened_path() == pdf_path
    assert controller.virtualizer.rendered_pages() == [1]


def test_open_failure_reports_error(controller, tmp_path):
    errors = Recorder(controller.error_occurred)

    assert controller.open_path(str(tmp_path / "missing.pdf")) is False
    assert len(errors.calls) == 1
    assert not controller.has_document


def test_navigation_clamps_and_clears_page_state(controller, pdf_path):
    controller.open_path(pdf_path)
    controller.select_rect(Rect(0, 0, 1000, 1000))
    assert controller.selection.count == 6

    controller.next_page()
    assert controller.current_page == 2
    assert controller.selection.count == 0
    assert controller.virtualizer.rendered_pages() == [2]

    controller.set_current_page(99)
    assert controller.current_page == 3
    controller.previous_page()
    assert controller.current_page == 2


def test_reading_position_is_saved_on_close(controller, pdf_path):
    controller.open_path(pdf_path)
    controller.set_current_page(2)
    controller.close_document()

    assert not controller.has_document
    assert controller.store.load_last_reading_page(pdf_path) == 2
    assert controller.store.load_doc_state("fp-" + pdf_path)["lastPage"] == 2

    controller.open_path(pdf_path)
    assert controller.current_page == 2


def test_search_cycles_through_matches(controller, pdf_path):
    updates = Recorder(controller.search_updated)
    controller.open_path(pdf_path)

    controller.run_search("ab")
    assert updates.last == (0, 2)
    controller.run_search("ab")
    assert updates.last == (1, 2)
    controller.run_search("ab", direction=-1)
    assert updates.last == (0, 2)

    highlight = controller.search_highlight(1)
    assert highlight.active == {1, 2}

    controller.run_search("zz")
    assert updates.last == (-1, 0)

    controller.clear_search()
    assert updates.last == (-1, -1)


def test_running_a_search_cancels_pending_input_clear(controller, pdf_path):
    controller.open_path(pdf_path)
    controller.search_text_edited()
    assert controller._search_input_debouncer.is_pending

    controller.run_search("ab")
    assert not controller._search_input_debouncer.is_pending


def test_click_toggles_and_updates_preview(controller, pdf_path):
    previews = Recorder(controller.selection_preview_changed)
    enabled = Recorder(controller.analyze_enabled_changed)
    controller.open_path(pdf_path)

    glyph = controller.click_at(7, 7)
    assert glyph.char == "a"
    assert previews.last == (1, "a")
    assert enabled.last == (True,)

    controller.click_at(7, 7)
    assert previews.last == (0, "—")
    assert enabled.last == (False,)


def test_rect_selection_reconstructs_text(controller, pdf_path):
    controller.open_path(pdf_path)
    controller.select_rect(Rect(0, 0, 1000, 1000))
    assert controller.selected_text() == "xababx"


def test_first_selection_invites_analysis(controller, pdf_path):
    controller.open_path(pdf_path)
    assert controller.pipeline.status != STATUS_SELECTION_CHANGED

    controller.click_at(7, 7)
    assert controller.pipeline.status == STATUS_SELECTION_CHANGED


def test_zoom_switches_to_manual_scale(controller, pdf_path):
    controller.open_path(pdf_path)

    controller.zoom_in()
    assert controller.zoom_label() == "130%"
    assert controller.store.load_settings().scale_mode == "manual"

    for _ in range(50):
        controller.zoom_out()
    assert controller.zoom_label() == "50%"

    controller.fit_width()
    assert controller.zoom_label() == "Fit"


def test_mode_toggle_lays_out_every_page(controller, pdf_path):
    controller.open_path(pdf_path)

    controller.toggle_mode()
    assert controller.mode is ViewMode.SCROLL
    assert len(controller.virtualizer.slots()) == 3
    assert controller.store.load_settings().mode == "scroll"


def test_theme_cycle_persists(controller):
    themes = Recorder(controller.theme_changed)
    controller.cycle_theme()

    assert themes.last == (controller.settings.theme,)
    assert controller.store.load_settings().theme == controller.settings.theme


def test_analyze_needs_service_settings(controller, pdf_path):
    controller.open_path(pdf_path)
    controller.select_rect(Rect(0, 0, 1000, 1000))

    assert controller.analyze("") is False
    assert controller.pipeline.status_is_error


def test_ai_config_is_persisted(controller):
    config = controller.ai_config
    config.api_key = "k"
    config.show_boxes = False

    assert controller.update_ai_config(config) is True
    assert controller.store.load_ai_config()["api_key"] == "k"
    assert controller.show_boxes is False
