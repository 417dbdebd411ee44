"""Default configuration values.

DEFAULT_CONFIG is a plain dict so it can be passed straight to deep_merge,
which copies rather than mutates its inputs.
"""

from typing import Any

from viewrender.rendering import DEFAULT_EXTENSION, DEFAULT_MAX_DEPTH

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "view": {
        "base_path": ".",
        "default_extension": DEFAULT_EXTENSION,
        "default_parameters": {},
        "placeholder_salt": "",
        "max_depth": DEFAULT_MAX_DEPTH,
    },
    "theme": {
        "path_map": {},
    },
    "aliases": {},
    "logging": {
        "level": "warning",
        "format": "json",
        "file": "",
    },
}
