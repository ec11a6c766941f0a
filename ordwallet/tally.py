"""Counted nouns such as "1 input" and "2 outputs"."""


def tally(noun: str, count: int) -> str:
    """Render ``count`` followed by ``noun``, pluralised unless the count is one."""
    if count == 1:
        return f"{count} {noun}"
    return f"{count} {noun}s"