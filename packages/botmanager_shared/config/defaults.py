"""Built-in default configuration values for Bot Manager.

These defaults are the final fallback in the configuration cascade:
CLI params > ENV vars > config file > built-in defaults.
"""

from __future__ import annotations

from typing import Any

BUILTIN_DEFAULTS: dict[str, Any] = {
    "logging": {
        "level": "INFO",
        "json_output": True,
        "service": "botmanager",
        "environment": "dev",
        "sinks": {},
    },
    "components": {
        "adapter": {
            "telegram": {
                "base_url": "https://api.telegram.org",
                "timeout_seconds": 10.0,
                "get_updates_limit": 100,
                "get_updates_timeout_seconds": 0,
            }
        }
    },
}
