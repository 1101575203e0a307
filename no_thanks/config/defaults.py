"""no_thanks.config.defaults
=========================

Central place for small, stable default values used across the package.
These defaults can be overridden via environment variables or an external
configuration file, but provide sensible fallbacks for applications and
tests.

This module intentionally avoids importing from other package modules to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Task adapters ----
# Whether task callables receive a grain function as their first argument.
DEFAULT_FINE_GRAINED = True
# Whether cancel() finalizes immediately instead of waiting for in-flight work.
DEFAULT_INTERRUPTIBLE = False

# ---- Logging ----
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_JSON = True
