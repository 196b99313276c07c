"""
Forecasting models.

Modules
-------
var             Vector autoregression fitted by OLS on ``Matrix``.
smoothing       Simple, double (additive / multiplicative) and triple
                exponential smoothing.
moving_average  Trailing simple moving averages.
state_space     Linear-Gaussian state-space model with a Kalman filter.
"""
