"""
Styling and theme management.
"""
from .models import ThemeColors
from .theme_manager import ThemeManager

__all__ = ['ThemeColors', 'ThemeManager']
