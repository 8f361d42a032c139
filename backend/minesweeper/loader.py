"""Board file loading.

A board file holds one row per line, each row a space-separated run of
``0`` (no bomb) and ``1`` (bomb) tokens. The matrix must be square.
"""

from typing import List


class BoardFileError(ValueError):
    """Raised when a board file is missing or does not describe a square 0/1 matrix."""


def parse_board_text(text: str) -> List[List[int]]:
    lines = text.splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        raise BoardFileError("board file is empty")

    matrix = []
    for lineno, line in enumerate(lines, start=1):
        tokens = line.split()
        if not tokens:
            raise BoardFileError(f"line {lineno}: blank row")
        bad = [t for t in tokens if t not in ('0', '1')]
        if bad:
            raise BoardFileError(f"line {lineno}: expected 0 or 1, got {bad[0]!r}")
        if matrix and len(tokens) != len(matrix[0]):
            raise BoardFileError(
                f"line {lineno}: row has {len(tokens)} values, expected {len(matrix[0])}"
            )
        matrix.append([int(t) for t in tokens])

    if len(matrix) != len(matrix[0]):
        raise BoardFileError(
            f"board is {len(matrix)}x{len(matrix[0])}, rows and columns must match"
        )
    return matrix


def load_board_matrix(path) -> List[List[int]]:
    try:
        with open(path, encoding='utf-8') as fh:
            text = fh.read()
    except OSError as exc:
        raise BoardFileError(f"cannot read board file {path}: {exc}") from exc
    return parse_board_text(text)
