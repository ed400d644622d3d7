from __future__ import annotations

import lazerlink.cli

raise SystemExit(lazerlink.cli.main())
