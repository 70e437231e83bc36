# File: scan_action/services/__init__.py
# Purpose: Scan orchestration services
