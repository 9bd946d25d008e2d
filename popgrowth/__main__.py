"""Allow ``python -m popgrowth``."""

import sys

from popgrowth.cli import main

sys.exit(main())
