# File: scan_action/infrastructure/__init__.py
# Purpose: Logging and CI runner integration
