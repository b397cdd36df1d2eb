"""
AI news crawler: pulls due sources from the content API, analyzes their
items, and pushes the results to the ingest endpoint.
"""

__version__ = "0.1.0"
