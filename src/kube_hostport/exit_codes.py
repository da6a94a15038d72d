from __future__ import annotations

OK = 0
ERR_USAGE = 2
ERR_OPERATION = 3
ERR_CONFIG = 4
ERR_INTERNAL = 99
