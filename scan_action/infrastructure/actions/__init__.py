# File: scan_action/infrastructure/actions/__init__.py
# Purpose: GitHub Actions runner integration
