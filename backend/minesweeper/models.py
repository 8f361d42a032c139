import enum
import random
import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Tuple

from minesweeper.loader import load_board_matrix

BOMB_PROBABILITY = 0.25


class CellStatus(enum.Enum):
    UNTOUCHED = 'untouched'
    FLAGGED = 'flagged'
    REVEALED = 'revealed'


class Outcome(enum.Enum):
    """Result of a dig."""
    NO_CHANGE = 'no_change'
    REVEALED = 'revealed'
    EXPLODED = 'exploded'


class Cell:
    """One grid position: bomb presence, visibility status and adjacent count.

    Cells are owned by a Board and only touched while the board lock is held.
    """

    def __init__(self, has_bomb=False):
        self._has_bomb = bool(has_bomb)
        self.status = CellStatus.UNTOUCHED
        self._adjacent = 0

    @property
    def has_bomb(self) -> bool:
        return self._has_bomb

    def remove_bomb(self) -> None:
        self._has_bomb = False

    @property
    def adjacent_bomb_count(self) -> int:
        return self._adjacent

    def set_adjacent_bomb_count(self, n: int) -> None:
        if not 0 <= n <= 8:
            raise ValueError(f"adjacent bomb count must be within 0..8, got {n}")
        self._adjacent = n

    def is_untouched(self) -> bool:
        return self.status is CellStatus.UNTOUCHED

    def is_flagged(self) -> bool:
        return self.status is CellStatus.FLAGGED

    def is_revealed(self) -> bool:
        return self.status is CellStatus.REVEALED

    def set_revealed(self) -> None:
        self.status = CellStatus.REVEALED

    def flag(self) -> None:
        if self.status is CellStatus.UNTOUCHED:
            self.status = CellStatus.FLAGGED

    def unflag(self) -> None:
        if self.status is CellStatus.FLAGGED:
            self.status = CellStatus.UNTOUCHED

    def render(self) -> str:
        if self.status is CellStatus.FLAGGED:
            return 'F'
        if self.status is CellStatus.UNTOUCHED:
            return '-'
        return ' ' if self._adjacent == 0 else str(self._adjacent)

    def __repr__(self):
        return f"Cell(has_bomb={self._has_bomb}, status={self.status.name}, adjacent={self._adjacent})"


class Board:
    """Square Minesweeper grid shared by every connected client.

    ``(x, y)`` addresses ``grid[x][y]``: ``x`` picks the row of the rendered
    text and ``y`` the column. Every public method holds the board-wide lock
    for its whole duration, so each call is atomic with respect to every
    other call from any thread. ``locked()`` lets a caller compose several
    calls into a single atomic step.
    """

    def __init__(self, matrix: Sequence[Sequence[int]]):
        size = len(matrix)
        if size == 0:
            raise ValueError("board must have at least one row")
        if any(len(row) != size for row in matrix):
            raise ValueError("board must be square")
        self._lock = threading.RLock()
        self._grid: List[List[Cell]] = [[Cell(bool(v)) for v in row] for row in matrix]
        self._recompute_adjacent_counts()

    @classmethod
    def random(cls, size: int, rng: Optional[random.Random] = None) -> 'Board':
        """Generate a size x size board, each cell a bomb with probability 1/4."""
        if size < 1:
            raise ValueError(f"board size must be at least 1, got {size}")
        rng = rng or random.Random()
        matrix = [[1 if rng.random() < BOMB_PROBABILITY else 0 for _ in range(size)] for _ in range(size)]
        return cls(matrix)

    @classmethod
    def from_file(cls, path) -> 'Board':
        return cls(load_board_matrix(path))

    @property
    def size(self) -> int:
        return len(self._grid)

    @contextmanager
    def locked(self) -> Iterator['Board']:
        with self._lock:
            yield self

    # ---- queries ----

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < len(self._grid) and 0 <= y < len(self._grid)

    def adjacent_bomb_count(self, x: int, y: int) -> int:
        with self._lock:
            if not self.in_bounds(x, y):
                return -1
            return self._grid[x][y].adjacent_bomb_count

    def is_flagged(self, x: int, y: int) -> bool:
        with self._lock:
            return self.in_bounds(x, y) and self._grid[x][y].is_flagged()

    def is_untouched(self, x: int, y: int) -> bool:
        with self._lock:
            return self.in_bounds(x, y) and self._grid[x][y].is_untouched()

    def has_bomb(self, x: int, y: int) -> bool:
        with self._lock:
            return self.in_bounds(x, y) and self._grid[x][y].has_bomb

    def bomb_count(self) -> int:
        with self._lock:
            return sum(1 for row in self._grid for cell in row if cell.has_bomb)

    def render(self) -> str:
        with self._lock:
            return ''.join(' '.join(cell.render() for cell in row) + '\r\n' for row in self._grid)

    def to_dict(self):
        with self._lock:
            return {
                'size': self.size,
                'rows': [[cell.render() for cell in row] for row in self._grid],
                'board': self.render(),
            }

    # ---- mutations ----

    def flag(self, x: int, y: int) -> None:
        with self._lock:
            if self.in_bounds(x, y):
                self._grid[x][y].flag()

    def deflag(self, x: int, y: int) -> None:
        with self._lock:
            if self.in_bounds(x, y):
                self._grid[x][y].unflag()

    def dig(self, x: int, y: int) -> Outcome:
        """Dig at (x, y).

        Untouched bomb-free cells are revealed and, when they border no bomb,
        flood-filled outward. A bomb cell loses its bomb, is revealed, and all
        counts are recomputed. Anything else is a no-op.
        """
        with self._lock:
            if not self.in_bounds(x, y) or not self._grid[x][y].is_untouched():
                return Outcome.NO_CHANGE
            cell = self._grid[x][y]
            if cell.has_bomb:
                cell.remove_bomb()
                cell.set_revealed()
                self._recompute_adjacent_counts()
                return Outcome.EXPLODED
            self._flood_reveal(x, y)
            return Outcome.REVEALED

    # ---- internals (lock held by caller) ----

    def _neighbors(self, x: int, y: int) -> Iterator[Tuple[int, int]]:
        for i in range(x - 1, x + 2):
            for j in range(y - 1, y + 2):
                if (i != x or j != y) and self.in_bounds(i, j):
                    yield i, j

    def _flood_reveal(self, x: int, y: int) -> None:
        # Cells are revealed before being pushed, so each is expanded at most once.
        self._grid[x][y].set_revealed()
        stack = [(x, y)]
        while stack:
            cx, cy = stack.pop()
            if self._grid[cx][cy].adjacent_bomb_count != 0:
                continue
            for i, j in self._neighbors(cx, cy):
                neighbor = self._grid[i][j]
                if neighbor.is_untouched():
                    neighbor.set_revealed()
                    stack.append((i, j))

    def _recompute_adjacent_counts(self) -> None:
        for x, row in enumerate(self._grid):
            for y, cell in enumerate(row):
                cell.set_adjacent_bomb_count(
                    sum(1 for i, j in self._neighbors(x, y) if self._grid[i][j].has_bomb)
                )

    def __repr__(self):
        return f"<Board size={self.size}>"
