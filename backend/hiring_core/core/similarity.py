"""
Edit-distance based fuzzy string comparison.
"""


def levenshtein_distance(first: str, second: str) -> int:
    """
    Classic Levenshtein distance (insert, delete, substitute all cost 1).

    Uses a rolling pair of rows instead of the full matrix.
    """
    if first == second:
        return 0
    if not first:
        return len(second)
    if not second:
        return len(first)

    previous = list(range(len(first) + 1))
    for i, second_char in enumerate(second, start=1):
        current = [i]
        for j, first_char in enumerate(first, start=1):
            if first_char == second_char:
                current.append(previous[j - 1])
            else:
                current.append(min(previous[j - 1], current[j - 1], previous[j]) + 1)
        previous = current
    return previous[-1]


def string_similarity(first: str, second: str) -> float:
    """
    Similarity ratio in [0.0, 1.0].

    The longer string (the first one on ties) is the normaliser:
    (len(longer) - distance) / len(longer). Two empty strings are identical.

    Example:
        >>> string_similarity("javascript", "javascrpt")
        0.9
    """
    if len(first) >= len(second):
        longer, shorter = first, second
    else:
        longer, shorter = second, first

    if len(longer) == 0:
        return 1.0

    distance = levenshtein_distance(longer, shorter)
    return (len(longer) - distance) / len(longer)
