#!/usr/bin/env python3
"""jqplay CLI entry point.

Run from a checkout without installing:
    python jqplay.py run '.a' -i data.json

Once installed, the same commands are available as:
    jqplay
"""

import sys
from jqplay.cli import main

if __name__ == "__main__":
    sys.exit(main())
