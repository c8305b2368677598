"""
Box Explorer: a glyph-level PDF reader with AI-assisted analysis of selections.
"""

__appname__ = "BoxExplorer"
__version__ = "0.3.0"
