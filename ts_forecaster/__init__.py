"""
ts-forecaster — small time-series forecasting toolkit.

The core is a dense ``Matrix`` primitive and a ``VectorAutoregression``
model built on it.  Scalar smoothing routines, moving averages and a
Kalman-filtered state-space model are re-exported here as well.
"""

from ts_forecaster.linalg.matrix import (
    PIVOT_TOLERANCE,
    DimensionMismatchError,
    Matrix,
    SingularMatrixError,
)
from ts_forecaster.models.moving_average import moving_average, moving_average_forecast
from ts_forecaster.models.smoothing import (
    DoubleExponentialSmoothingResult,
    HoltWintersResult,
    double_exponential_smoothing_additive,
    double_exponential_smoothing_multiplicative,
    exponential_smoothing,
    exponential_smoothing_forecast,
    triple_exponential_smoothing,
)
from ts_forecaster.models.state_space import (
    KalmanFilterResult,
    StateSpaceModel,
    local_level_model,
)
from ts_forecaster.models.var import (
    DesignMatrices,
    InsufficientDataError,
    ModelNotFittedError,
    VectorAutoregression,
)

__version__ = "0.1.0"

__all__ = [
    "PIVOT_TOLERANCE",
    "DesignMatrices",
    "DimensionMismatchError",
    "DoubleExponentialSmoothingResult",
    "HoltWintersResult",
    "InsufficientDataError",
    "KalmanFilterResult",
    "Matrix",
    "ModelNotFittedError",
    "SingularMatrixError",
    "StateSpaceModel",
    "VectorAutoregression",
    "double_exponential_smoothing_additive",
    "double_exponential_smoothing_multiplicative",
    "exponential_smoothing",
    "exponential_smoothing_forecast",
    "local_level_model",
    "moving_average",
    "moving_average_forecast",
    "triple_exponential_smoothing",
]
