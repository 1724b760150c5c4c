from __future__ import annotations


def levenshtein(source: str, target: str) -> int:
    """Classic edit distance where insertion, deletion and substitution cost 1."""
    if not source:
        return len(target)
    if not target:
        return len(source)

    rows = len(source) + 1
    cols = len(target) + 1
    table = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if source[i - 1] == target[j - 1] else 1
            table[i][j] = min(
                table[i - 1][j] + 1,
                table[i][j - 1] + 1,
                table[i - 1][j - 1] + cost,
            )
    return table[-1][-1]


def similarity(source: str, target: str) -> float:
    """Return 1 - distance / longest length, in [0, 1]."""
    if source == target:
        return 1.0
    if not source or not target:
        return 0.0
    distance = levenshtein(source, target)
    return 1.0 - distance / max(len(source), len(target))
