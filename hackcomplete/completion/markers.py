"""
The completion marker.

Before a completion run the cursor position is marked by appending a
reserved suffix to the identifier being typed, so the normal naming and
typing passes carry it through to the hooks.
"""

AUTO_COMPLETE_SUFFIX = "AUTO332"
SUFFIX_LEN = len(AUTO_COMPLETE_SUFFIX)


def is_auto_complete_name(name: str) -> bool:
    return len(name) >= SUFFIX_LEN and name.endswith(AUTO_COMPLETE_SUFFIX)


def strip_suffix(name: str) -> str:
    """Remove the marker from a name known to carry it."""
    return name[: len(name) - SUFFIX_LEN]


def insert_marker(lines: list[str], line: int, character: int) -> str:
    """
    Return the document text with the marker inserted at the cursor.

    Args:
        lines: Document lines, keeping their line endings (as pygls does)
        line: 0-based cursor line
        character: 0-based cursor column

    Returns:
        Full text ready to be typechecked for completion
    """
    if line >= len(lines):
        text = "".join(lines)
        if text and not text.endswith("\n"):
            text += "\n"
        return text + AUTO_COMPLETE_SUFFIX

    current = lines[line]
    column = min(character, len(current.rstrip("\n")))
    marked = current[:column] + AUTO_COMPLETE_SUFFIX + current[column:]
    return "".join(lines[:line]) + marked + "".join(lines[line + 1:])
