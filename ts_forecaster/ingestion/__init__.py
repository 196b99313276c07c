"""
Input loaders.

Modules
-------
series_csv   CSV file → validated ``SeriesTable`` of float observations.
"""
