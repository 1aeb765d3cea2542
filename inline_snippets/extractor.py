"""Line-range slicing of fetched file content."""

from __future__ import annotations


def extract_lines(content: str, start_line: int, end_line: int) -> str:
    """Return lines `start_line` through `end_line` (1-based, inclusive).

    Lines are split on ``"\\n"`` and rejoined with ``"\\n"``. An `end_line` past
    the end of the content truncates to the last available line; a
    `start_line` past the end yields an empty string. Neither is an error.

    Args:
        content: Full file text.
        start_line: First line to keep.
        end_line: Last line to keep.

    Returns:
        str: The selected lines.

    Examples:
        extract_lines("a\\nb\\nc\\nd", 2, 3)  # "b\\nc"
        extract_lines("a\\nb", 2, 99)  # "b"
    """
    return "\n".join(content.split("\n")[start_line - 1 : end_line])
