"""Allow running as python -m security_monitor."""

import sys

from security_monitor.cli import main

sys.exit(main())
