#!/usr/bin/env python3
"""Allow running as `python -m chainkit`."""

import sys

from chainkit.cli import main

sys.exit(main())
