from __future__ import annotations

import difflib
import html
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass
class DiffRow:
    kind: str  # equal | insert | delete | replace
    left_no: Optional[int] = None
    left: str = ""
    right_no: Optional[int] = None
    right: str = ""


def line_count(text: str) -> int:
    return len((text or "").split("\n"))


def _lines(text: str) -> List[str]:
    return (text or "").split("\n")


def side_by_side(old: str, new: str) -> List[DiffRow]:
    """Pair up lines of ``old`` and ``new`` for a split diff view.

    Replaced blocks of unequal length are padded with blank cells on the
    shorter side.
    """
    old_lines = _lines(old)
    new_lines = _lines(new)
    matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)

    rows: List[DiffRow] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            for offset in range(i2 - i1):
                rows.append(
                    DiffRow("equal", i1 + offset + 1, old_lines[i1 + offset], j1 + offset + 1, new_lines[j1 + offset])
                )
        elif tag == "delete":
            for i in range(i1, i2):
                rows.append(DiffRow("delete", left_no=i + 1, left=old_lines[i]))
        elif tag == "insert":
            for j in range(j1, j2):
                rows.append(DiffRow("insert", right_no=j + 1, right=new_lines[j]))
        else:
            for offset in range(max(i2 - i1, j2 - j1)):
                row = DiffRow("replace")
                if i1 + offset < i2:
                    row.left_no = i1 + offset + 1
                    row.left = old_lines[i1 + offset]
                if j1 + offset < j2:
                    row.right_no = j1 + offset + 1
                    row.right = new_lines[j1 + offset]
                rows.append(row)
    return rows


def diff_stats(old: str, new: str) -> Dict[str, int]:
    added = removed = 0
    for line in difflib.unified_diff(_lines(old), _lines(new), lineterm="", n=0):
        if line.startswith(("+++", "---", "@@")):
            continue
        if line.startswith("+"):
            added += 1
        elif line.startswith("-"):
            removed += 1
    return {"added": added, "removed": removed}


_ROW_STYLE = {
    "equal": ("", ""),
    "insert": ("", "background:rgba(34,197,94,0.15);"),
    "delete": ("background:rgba(220,38,38,0.15);", ""),
    "replace": ("background:rgba(220,38,38,0.15);", "background:rgba(34,197,94,0.15);"),
}

_WORD_REMOVED = "background:rgba(220,38,38,0.35);border-radius:2px;"
_WORD_ADDED = "background:rgba(34,197,94,0.35);border-radius:2px;"

_CELL = "padding:2px 10px;font-family:'JetBrains Mono',monospace;font-size:13px;white-space:pre-wrap;"
_GUTTER = "padding:2px 8px;color:#8b95a7;text-align:right;user-select:none;min-width:40px;"

_TOKEN = re.compile(r"\w+|\s+|[^\w\s]")


def _tokens(text: str) -> List[str]:
    return _TOKEN.findall(text)


def _mark(tokens: List[str], style: str) -> str:
    text = html.escape("".join(tokens))
    return f"<span style='{style}'>{text}</span>" if text else ""


def word_highlight(old_line: str, new_line: str) -> Tuple[str, str]:
    """Escaped HTML for a changed line pair with differing words wrapped in spans."""
    old_tokens = _tokens(old_line)
    new_tokens = _tokens(new_line)
    matcher = difflib.SequenceMatcher(None, old_tokens, new_tokens, autojunk=False)

    left: List[str] = []
    right: List[str] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            left.append(html.escape("".join(old_tokens[i1:i2])))
            right.append(html.escape("".join(new_tokens[j1:j2])))
            continue
        left.append(_mark(old_tokens[i1:i2], _WORD_REMOVED))
        right.append(_mark(new_tokens[j1:j2], _WORD_ADDED))
    return "".join(left), "".join(right)


def _cell(number: Optional[int], content: str, style: str) -> str:
    no = "" if number is None else str(number)
    return (
        f"<td style='{_GUTTER}{style}'>{no}</td>"
        f"<td style='{_CELL}{style}'>{content}</td>"
    )


def render_html(
    rows: List[DiffRow],
    old_title: str = "Original Code",
    new_title: str = "Migrated Code",
) -> str:
    parts = [
        "<div style='overflow:auto;border:1px solid #2a3346;border-radius:8px;'>",
        "<table style='width:100%;border-collapse:collapse;'>",
        "<tr>"
        f"<th colspan='2' style='padding:10px 14px;text-align:left;text-transform:uppercase;'>{html.escape(old_title)}</th>"
        f"<th colspan='2' style='padding:10px 14px;text-align:left;text-transform:uppercase;'>{html.escape(new_title)}</th>"
        "</tr>",
    ]
    for row in rows:
        left_style, right_style = _ROW_STYLE[row.kind]
        if row.kind == "replace" and row.left_no and row.right_no:
            left, right = word_highlight(row.left, row.right)
        else:
            left, right = html.escape(row.left), html.escape(row.right)
        parts.append(
            "<tr>"
            + _cell(row.left_no, left, left_style if row.left_no else "")
            + _cell(row.right_no, right, right_style if row.right_no else "")
            + "</tr>"
        )
    parts.append("</table></div>")
    return "".join(parts)
