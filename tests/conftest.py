from __future__ import annotations

import os
import sys


PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Minimal environment for module imports during tests
os.environ.setdefault("DASHBOARD_TOKEN_BACKEND", "memory")
os.environ.setdefault("DASHBOARD_USERS_URL", "https://admin.example.test/api/admin/auth/users")
os.environ.setdefault("DASHBOARD_LOG_LEVEL", "INFO")
