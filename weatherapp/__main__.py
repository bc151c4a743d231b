"""Allow ``python -m weatherapp``."""

import sys

from weatherapp.cli import main

sys.exit(main())
