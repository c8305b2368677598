import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5 import QtWidgets  # noqa: E402

from boxexplorer.core.page import BBox, Glyph  # noqa: E402
from boxexplorer.core.selection import SelectionEntry  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    yield app


def make_glyph(page, glyph_id, char="a", x=0, y=0, w=10, h=10):
    return Glyph(page=page, id=glyph_id, char=char, bbox=BBox(x, y, w, h))


def make_entry(page, glyph_id, char="a", x=0, y=0, w=10, h=10):
    return SelectionEntry.from_glyph(make_glyph(page, glyph_id, char, x, y, w, h))
