"""Allow running the engine shell with ``python -m deskvfs``."""

import sys

from deskvfs.main import main


sys.exit(main())
