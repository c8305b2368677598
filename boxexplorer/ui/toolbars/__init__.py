from .search_bar import SearchBar, SearchLineEdit

__all__ = ["SearchBar", "SearchLineEdit"]
