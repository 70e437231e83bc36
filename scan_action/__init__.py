# File: scan_action/__init__.py
# Purpose: Container image scan action package
__version__ = "0.5.0"
