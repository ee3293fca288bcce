#!/usr/bin/env python3
"""Command-line helper to build a devnet or bulk genesis.

Forwards its arguments to :func:`nomgen.cli.main`, so
``python generate_genesis.py generate-devnet --ez`` works from a checkout
without installing the package.
"""

from __future__ import annotations

import sys

from nomgen.cli import main


if __name__ == "__main__":  # pragma: no cover - manual execution
    main(sys.argv[1:])
