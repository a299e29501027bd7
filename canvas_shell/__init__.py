"""
Canvas Shell.

Interactive command-line client for the Canvas REST API.
"""

__version__ = "0.1.0"
