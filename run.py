#!/usr/bin/env python3
"""Convenience runner for the GeoDrink route water finder.

Usage:
    python run.py route.gpx --buffer 50 --filter potable-only
"""
import logging
from geodrink.main import main

if __name__ == "__main__":
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    raise SystemExit(main())
