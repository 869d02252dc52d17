"""
canvas-sync: download new files from a Canvas course, keeping its folder tree.
"""

__version__ = "0.3.0"
