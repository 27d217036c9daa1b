def line_number(text: str, index: int) -> int:
    """1-based line of ``index`` in ``text``; -1 when the index is unknown."""
    if index < 0:
        return -1
    return text.count("\n", 0, index) + 1
