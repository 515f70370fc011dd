"""sbash executable module.

The console script entry point is cli.main(); `python -m sbash` goes through
the same function.
"""

from __future__ import annotations

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
