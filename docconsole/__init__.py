"""
docconsole - controller layer for the documentation library console.
Drives incremental search, release batch sync and library forms against the console API.
"""

__version__ = "0.1.0"
