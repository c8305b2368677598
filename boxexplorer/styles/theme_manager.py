"""
Theme management and styling for the application.
"""
from typing import Dict, List

from PyQt5.QtWidgets import QWidget

from .models import ThemeColors


class ThemeManager:
    """Manages application themes and styling."""

    SEPIA_THEME = ThemeColors(
        # Backgrounds
        bg_primary="#f4ecd8",
        bg_secondary="#fbf6ea",
        bg_tertiary="#e8dcc0",

        # Text
        text_primary="#433422",
        text_secondary="#6f5b40",
        text_muted="#9a8668",

        # Accent
        accent_primary="#b5762b",
        accent_hover="#a0661f",

        # Borders
        border_primary="#d8c8a8",
        border_secondary="#e8dcc0",

        # Glyph overlays
        box_outline=(140, 110, 70, 60),
        box_selected=(181, 118, 43, 110),
        box_search=(255, 196, 0, 90),
        box_search_active=(255, 120, 0, 150),

        error="#c0392b",
    )

    LIGHT_THEME = ThemeColors(
        # Backgrounds
        bg_primary="#f0f0f0",
        bg_secondary="#ffffff",
        bg_tertiary="#e0e0e0",

        # Text
        text_primary="#2e2e2e",
        text_secondary="#7A899C",
        text_muted="#8899AA",

        # Accent
        accent_primary="#4a9eff",
        accent_hover="#3a8eef",

        # Borders
        border_primary="#cccccc",
        border_secondary="#e0e0e0",

        # Glyph overlays
        box_outline=(0, 89, 195, 40),
        box_selected=(0, 89, 195, 100),
        box_search=(255, 212, 59, 110),
        box_search_active=(255, 140, 0, 160),

        error="#ff6b6b",
    )

    DARK_THEME = ThemeColors(
        # Backgrounds
        bg_primary="#2e2e2e",
        bg_secondary="#3e3e3e",
        bg_tertiary="#4e4e4e",

        # Text
        text_primary="#f0f0f0",
        text_secondary="#B5B5C5",
        text_muted="#8899AA",

        # Accent
        accent_primary="#4a9eff",
        accent_hover="#3a8eef",

        # Borders
        border_primary="#555555",
        border_secondary="#3e3e3e",

        # Glyph overlays
        box_outline=(255, 255, 255, 40),
        box_selected=(255, 255, 0, 100),
        box_search=(81, 207, 102, 100),
        box_search_active=(255, 107, 107, 150),

        error="#ff6b6b",
        invert_pages=True,
    )

    THEMES: Dict[str, ThemeColors] = {
        "sepia": SEPIA_THEME,
        "light": LIGHT_THEME,
        "dark": DARK_THEME,
    }

    # Cycling order of the theme toggle
    THEME_ORDER: List[str] = ["sepia", "light", "dark"]

    LABELS: Dict[str, str] = {"sepia": "Sepia", "light": "Light", "dark": "Dark"}

    @classmethod
    def get_theme_colors(cls, name: str) -> ThemeColors:
        """Colors for a theme name; unknown names fall back to sepia."""
        return cls.THEMES.get(name, cls.SEPIA_THEME)

    @classmethod
    def next_theme(cls, name: str) -> str:
        """Theme following ``name`` in the cycle sepia, light, dark."""
        try:
            index = cls.THEME_ORDER.index(name)
        except ValueError:
            return cls.THEME_ORDER[0]
        return cls.THEME_ORDER[(index + 1) % len(cls.THEME_ORDER)]

    @classmethod
    def label(cls, name: str) -> str:
        return cls.LABELS.get(name, "Theme")

    @classmethod
    def apply_theme(cls, widget: QWidget, name: str) -> None:
        """
        Apply theme to a widget and its children.

        Args:
            widget: Widget to style
            name: Theme name
        """
        widget.setStyleSheet(cls._generate_stylesheet(cls.get_theme_colors(name)))

    @classmethod
    def _generate_stylesheet(cls, theme: ThemeColors) -> str:
        """
        Generate a complete stylesheet from theme colors.

        Args:
            theme: Theme colors to use

        Returns:
            Complete CSS stylesheet string
        """
        return f"""
            /* --- GENERAL STYLES --- */
            QMainWindow, QWidget, QLineEdit, QLabel, QFrame {{
                background-color: {theme.bg_primary};
                color: {theme.text_primary};
                border: none;
            }}

            /* --- BUTTONS --- */
            QPushButton {{
                background-color: {theme.bg_tertiary};
                color: {theme.text_primary};
                border: none;
                border-radius: 6px;
                padding: 6px 12px;
                font-weight: bold;
            }}
            QPushButton:hover {{
                background-color: {theme.bg_secondary};
            }}
            QPushButton:disabled {{
                background-color: {theme.bg_secondary};
                color: {theme.text_muted};
            }}
            QPushButton[objectName="analyzeButton"] {{
                background-color: {theme.accent_primary};
                color: white;
            }}
            QPushButton[objectName="analyzeButton"]:hover {{
                background-color: {theme.accent_hover};
            }}

            /* --- INPUTS --- */
            QLineEdit, QPlainTextEdit, QDoubleSpinBox, QSpinBox {{
                background-color: {theme.bg_secondary};
                border: 1px solid {theme.border_primary};
                border-radius: 6px;
                padding: 4px 8px;
                color: {theme.text_primary};
            }}
            QLineEdit:focus, QPlainTextEdit:focus {{
                border: 1px solid {theme.accent_primary};
            }}
            QLineEdit[objectName="page_input"] {{
                min-width: 48px;
                max-width: 48px;
            }}

            /* --- LABELS --- */
            QLabel {{
                background-color: transparent;
            }}
            QLabel[objectName="statusLabel"] {{
                color: {theme.text_muted};
            }}
            QLabel[objectName="statusLabel"][error="true"] {{
                color: {theme.error};
            }}

            /* --- PANELS --- */
            #TopFrame {{
                background-color: {theme.bg_primary};
                border-bottom: 1px solid {theme.border_secondary};
            }}
            #AnalysisPanel {{
                background-color: {theme.bg_secondary};
                border-left: 1px solid {theme.border_primary};
            }}
            QTextBrowser {{
                background-color: {theme.bg_secondary};
                color: {theme.text_primary};
                border: 1px solid {theme.border_secondary};
                border-radius: 6px;
            }}

            /* --- SCROLL AREA --- */
            QScrollArea, #DocumentCanvas {{
                background-color: {theme.bg_tertiary};
                border: none;
            }}
            QScrollBar:vertical {{
                background-color: {theme.bg_primary};
                width: 12px;
                border: none;
            }}
            QScrollBar::handle:vertical {{
                background-color: {theme.border_primary};
                border-radius: 6px;
                min-height: 20px;
            }}
            QScrollBar::add-line:vertical,
            QScrollBar::sub-line:vertical {{
                background: none;
                height: 0px;
            }}

            /* --- MESSAGE BOX --- */
            QMessageBox QLabel {{
                color: {theme.text_primary};
            }}
        """
