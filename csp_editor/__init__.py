"""
CSP Editor - fetch, inspect and edit Content-Security-Policy headers
"""

__version__ = "0.1.0"
