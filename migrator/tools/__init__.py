from migrator.tools.diff import (
    DiffRow,
    diff_stats,
    line_count,
    render_html,
    side_by_side,
    word_highlight,
)
from migrator.tools.fences import strip_code_fences

__all__ = [
    "DiffRow",
    "diff_stats",
    "line_count",
    "render_html",
    "side_by_side",
    "strip_code_fences",
    "word_highlight",
]
