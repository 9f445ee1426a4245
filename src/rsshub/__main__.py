#!/usr/bin/env python3
"""
Allows ``python -m rsshub <command> <subcommand>``.
"""

import sys

from .cli_router import main

sys.exit(main())
