"""
Dense matrix primitive used by the regression and state-space models.

Design
------
``Matrix`` is a small, immutable, row-major container of floats.  It exists
so the forecasting models can express ordinary least squares and Kalman
filtering directly in terms of matrix algebra, without pulling in a numeric
backend for what are always tiny (tens of rows) problems.

Every operation returns a NEW matrix.  No method mutates ``self`` or its
operands, and the constructor copies its input rows, so two instances never
share backing storage.

Shape checks
------------
Every operation validates operand shapes before touching any element and
raises ``DimensionMismatchError`` on a mismatch.  A partially-built result
is never returned.

Inversion
---------
``inverse()`` uses Gauss–Jordan elimination on the augmented matrix
``[M | I]`` with partial pivoting: for each column, the row (at or below the
current one) with the largest absolute value in that column is swapped into
the pivot position.  If that largest value is not above ``tolerance``
(``PIVOT_TOLERANCE = 1e-10`` by default), or is NaN, the matrix is treated
as singular and ``SingularMatrixError`` is raised.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

PIVOT_TOLERANCE = 1e-10  # smallest pivot magnitude accepted by inverse()


# ── Custom exceptions ─────────────────────────────────────────────────────────


class DimensionMismatchError(ValueError):
    """Raised when matrix operands (or input data) have incompatible shapes.

    Attributes:
        operation: Name of the operation that rejected its operands.
        left:      Shape of the left operand / declared shape, if known.
        right:     Shape of the right operand / actual shape, if known.
    """

    def __init__(
        self,
        operation: str,
        left: tuple[int, int] | None = None,
        right: tuple[int, int] | None = None,
        detail: str | None = None,
    ) -> None:
        self.operation = operation
        self.left      = left
        self.right     = right
        msg = f"Dimension mismatch in {operation}"
        if left is not None and right is not None:
            msg += f": {left[0]}x{left[1]} vs {right[0]}x{right[1]}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg + ".")


class SingularMatrixError(ArithmeticError):
    """Raised when ``Matrix.inverse()`` finds no usable pivot in a column.

    Attributes:
        column:    Zero-based column where elimination failed.
        pivot:     Largest absolute candidate pivot found in that column.
        tolerance: Threshold the pivot had to exceed.
    """

    def __init__(self, column: int, pivot: float, tolerance: float) -> None:
        self.column    = column
        self.pivot     = pivot
        self.tolerance = tolerance
        super().__init__(
            f"Matrix is singular or near-singular: largest pivot in column {column} "
            f"is {pivot:.3e} (tolerance {tolerance:.1e})."
        )


# ── Matrix ────────────────────────────────────────────────────────────────────


class Matrix:
    """Immutable dense ``rows x cols`` matrix of floats.

    Args:
        rows: Number of rows (> 0).
        cols: Number of columns (> 0).
        data: Row-major sequence of ``rows`` rows, each of length ``cols``.

    Raises:
        DimensionMismatchError: If the shape is non-positive or ``data`` does
            not match the declared shape.
    """

    __slots__ = ("_rows", "_cols", "_data")

    def __init__(self, rows: int, cols: int, data: Sequence[Sequence[float]]) -> None:
        if rows < 1 or cols < 1:
            raise DimensionMismatchError(
                "construct", detail=f"shape must be positive, got {rows}x{cols}"
            )
        if len(data) != rows:
            raise DimensionMismatchError(
                "construct", detail=f"expected {rows} rows, got {len(data)}"
            )
        copied: list[tuple[float, ...]] = []
        for i, row in enumerate(data):
            if len(row) != cols:
                raise DimensionMismatchError(
                    "construct", detail=f"row {i} has {len(row)} elements, expected {cols}"
                )
            copied.append(tuple(float(v) for v in row))

        self._rows = rows
        self._cols = cols
        self._data: tuple[tuple[float, ...], ...] = tuple(copied)

    # ── Constructors ──────────────────────────────────────────────────────────

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> Matrix:
        """Build a matrix, inferring the shape from a non-empty list of rows."""
        if not rows:
            raise DimensionMismatchError("construct", detail="no rows given")
        return cls(len(rows), len(rows[0]), rows)

    @classmethod
    def column(cls, values: Sequence[float]) -> Matrix:
        """Build an ``n x 1`` column vector."""
        return cls(len(values), 1, [[v] for v in values])

    @classmethod
    def zeros(cls, rows: int, cols: int) -> Matrix:
        return cls(rows, cols, [[0.0] * cols for _ in range(rows)])

    @classmethod
    def identity(cls, n: int) -> Matrix:
        return cls(n, n, [[1.0 if i == j else 0.0 for j in range(n)] for i in range(n)])

    # ── Accessors ─────────────────────────────────────────────────────────────

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    def at(self, i: int, j: int) -> float:
        """Return the element at row ``i``, column ``j`` (zero-based)."""
        return self._data[i][j]

    def to_list(self) -> list[list[float]]:
        """Return a fresh nested-list copy of the data."""
        return [list(r) for r in self._data]

    # ── Algebra ───────────────────────────────────────────────────────────────

    def multiply(self, other: Matrix) -> Matrix:
        """Matrix product ``self x other``.

        Raises:
            DimensionMismatchError: If ``self.cols != other.rows``.
        """
        if self._cols != other._rows:
            raise DimensionMismatchError("multiply", self.shape, other.shape)

        other_cols = list(zip(*other._data))
        result = [
            [math.fsum(a * b for a, b in zip(row, col)) for col in other_cols]
            for row in self._data
        ]
        return Matrix(self._rows, other._cols, result)

    def add(self, other: Matrix) -> Matrix:
        """Elementwise sum.  Shapes must be identical."""
        self._require_same_shape("add", other)
        return Matrix(
            self._rows,
            self._cols,
            [[a + b for a, b in zip(r1, r2)] for r1, r2 in zip(self._data, other._data)],
        )

    def subtract(self, other: Matrix) -> Matrix:
        """Elementwise difference ``self - other``.  Shapes must be identical."""
        self._require_same_shape("subtract", other)
        return Matrix(
            self._rows,
            self._cols,
            [[a - b for a, b in zip(r1, r2)] for r1, r2 in zip(self._data, other._data)],
        )

    def transpose(self) -> Matrix:
        return Matrix(self._cols, self._rows, [list(col) for col in zip(*self._data)])

    def inverse(self, tolerance: float = PIVOT_TOLERANCE) -> Matrix:
        """Invert a square matrix by Gauss–Jordan elimination with partial pivoting.

        Args:
            tolerance: Minimum absolute pivot magnitude.  A column whose best
                candidate pivot is not above this is treated as singular.

        Returns:
            ``M^-1`` such that ``M x M^-1`` is the identity within rounding.

        Raises:
            DimensionMismatchError: If the matrix is not square.
            SingularMatrixError: If no pivot above ``tolerance`` exists in
                some column.
        """
        n = self._rows
        if n != self._cols:
            raise DimensionMismatchError(
                "inverse", self.shape, detail="matrix must be square"
            )

        # Augmented [A | I], mutated locally only.
        aug = [
            list(self._data[i]) + [1.0 if i == j else 0.0 for j in range(n)]
            for i in range(n)
        ]

        for col in range(n):
            pivot_row = max(range(col, n), key=lambda r: abs(aug[r][col]))
            pivot = aug[pivot_row][col]
            if not abs(pivot) > tolerance:
                raise SingularMatrixError(col, abs(pivot), tolerance)
            if pivot_row != col:
                aug[col], aug[pivot_row] = aug[pivot_row], aug[col]

            pivot_vals = [v / pivot for v in aug[col]]
            aug[col] = pivot_vals
            for r in range(n):
                if r == col:
                    continue
                factor = aug[r][col]
                if factor != 0.0:
                    aug[r] = [a - factor * b for a, b in zip(aug[r], pivot_vals)]

        return Matrix(n, n, [r[n:] for r in aug])

    def allclose(self, other: Matrix, tol: float = 1e-9) -> bool:
        """True when shapes match and every element differs by at most ``tol``."""
        if self.shape != other.shape:
            return False
        return all(
            abs(a - b) <= tol
            for r1, r2 in zip(self._data, other._data)
            for a, b in zip(r1, r2)
        )

    # ── Operator aliases ──────────────────────────────────────────────────────

    def __matmul__(self, other: Matrix) -> Matrix:
        return self.multiply(other)

    def __add__(self, other: Matrix) -> Matrix:
        return self.add(other)

    def __sub__(self, other: Matrix) -> Matrix:
        return self.subtract(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and self._data == other._data

    def __repr__(self) -> str:
        return f"Matrix({self._rows}, {self._cols}, {self.to_list()!r})"

    # ── Private helpers ───────────────────────────────────────────────────────

    def _require_same_shape(self, operation: str, other: Matrix) -> None:
        if self.shape != other.shape:
            raise DimensionMismatchError(operation, self.shape, other.shape)
