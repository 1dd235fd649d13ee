"""
Package root for the Scenario Sage price-scenario forecasting toolkit.
It groups the time-series core, the forecast-service client, and the HTTP API under one import path.
Most functionality lives in the subpackages; this file intentionally stays lightweight.
"""
