"""Global pytest configuration."""

import os

# Keep tests offline and free of log files; set before any package import
os.environ.setdefault("ROUTE_PROVIDER", "none")
os.environ.setdefault("PERF_LOGGING_ENABLED", "false")
os.environ.setdefault("DEFAULT_CATEGORY_QUOTAS", "{}")
