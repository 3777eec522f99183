"""Entry point for `python -m eventlens`.

Usage:
    python -m eventlens
    uv run python -m eventlens
"""

from __future__ import annotations

import asyncio

from eventlens.app import main

asyncio.run(main())
