"""
Rolling-origin backtesting for the forecasting models.

Modules
-------
splits      Expanding-window fold generation over integer indices.
models      Naive multivariate baselines and the VAR adapter.
metrics     MAE, RMSE, MAPE, directional accuracy and supporting types.
evaluator   Refits every model at every fold and emits PredictionRecords.
"""
