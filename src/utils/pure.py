from typing import List, Literal, Optional, Sequence

from docstore.models import Timestamp


def format_money(amount: float) -> str:
    return f"${amount:.2f}"


def format_timestamp(ts: Optional[Timestamp]) -> str:
    """Local date and time of a server timestamp, or "Just now" before it is stamped."""
    if ts is None:
        return "Just now"
    return ts.to_datetime().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def generate_markdown_table(
    headers: Sequence[str],
    rows: List[Sequence[object]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Generate a Markdown table.

    Args:
        headers: column headers.
        rows: cells of each row, converted with str().
        aligns: 'l', 'c' or 'r' per column, left aligned when omitted.

    Returns:
        str: the table, or "" when there are no rows.
    """
    if not rows:
        return ""

    aligns = aligns or ["l"] * len(headers)
    if len(aligns) != len(headers):
        raise ValueError("Length of aligns must match number of headers.")

    align_map = {"l": ":---", "c": ":---:", "r": "---:"}
    lines = [
        "| " + " | ".join(map(str, headers)) + " |",
        "| " + " | ".join(align_map[a] for a in aligns) + " |",
    ]
    lines += ["| " + " | ".join(map(str, row)) + " |" for row in rows]
    return "\n".join(lines)
