"""
Property analytics engine for the real estate backend.

This package normalizes raw listing rows, derives per-property financial
metrics, and builds the grouped, ranked and time-series reports served by
the API. Nothing here talks HTTP; record loading lives in record_store.
"""
