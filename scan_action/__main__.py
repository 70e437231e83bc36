# File: scan_action/__main__.py
# Purpose: Allow ``python -m scan_action``
import sys

from scan_action.main import main

sys.exit(main())
