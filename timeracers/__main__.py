"""Allow ``python -m timeracers``."""

import sys

from timeracers.main import main

sys.exit(main())
