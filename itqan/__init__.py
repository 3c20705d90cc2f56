"""Itqan — localized web front-end for the Itqan content marketplace."""

__version__ = "0.1.0"
