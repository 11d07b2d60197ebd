#!/usr/bin/env python3
"""
Entry point for vpn-ipam CLI tool.
"""

import sys

from vpn_ipam.cli.cli import main

if __name__ == "__main__":
    sys.exit(main())
