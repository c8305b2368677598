from .analysis_panel import AnalysisPanel
from .document_view import DocumentCanvas, DocumentView
from .page_widget import PageWidget

__all__ = ["AnalysisPanel", "DocumentCanvas", "DocumentView", "PageWidget"]
