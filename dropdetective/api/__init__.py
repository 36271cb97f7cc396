"""
Drop Detective API
==================

FastAPI application exposing sheet analysis, results and CSV export.
"""
