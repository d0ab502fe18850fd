"""Algorithms used by the dashboard aggregation pipeline.

Pure numpy/Python implementations of grouping (counts, rates, five-number
summaries) and R-7 quantiles. Nothing here depends on Plotly or NiceGUI.
"""
