from .metrics import comparison_frame, format_millions, summarize, totals_frame
from .outputs import save_results

__all__ = ["comparison_frame", "format_millions", "save_results", "summarize", "totals_frame"]
