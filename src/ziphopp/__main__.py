"""Allow running as ``python -m ziphopp``."""

import sys

from ziphopp.app import main

sys.exit(main())
