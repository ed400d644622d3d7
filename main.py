#!/usr/bin/env python3.11
from __future__ import annotations

import lazerlink.cli

if __name__ == "__main__":
    exit(lazerlink.cli.main())
