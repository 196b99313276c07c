"""
Dense linear algebra for the forecasting models.

Modules
-------
matrix   Immutable ``Matrix`` type, shape errors, Gauss–Jordan inversion.
"""

from ts_forecaster.linalg.matrix import (
    PIVOT_TOLERANCE,
    DimensionMismatchError,
    Matrix,
    SingularMatrixError,
)

__all__ = [
    "PIVOT_TOLERANCE",
    "DimensionMismatchError",
    "Matrix",
    "SingularMatrixError",
]
