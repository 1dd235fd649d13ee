"""
Package marker for the hosted forecast and summarization service integration.
It groups the wire contracts, the HTTP client, and the validating actions used by the API layer.
"""
