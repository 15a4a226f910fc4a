"""Allow ``python -m walgraph``."""

import sys

from .cli import main

sys.exit(main())
