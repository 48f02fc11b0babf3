"""Candidacy graph engine: chain enumeration and relationship summaries."""

__version__ = "0.1.0"
