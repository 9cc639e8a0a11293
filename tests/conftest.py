"""Root conftest — shared test configuration.

Environment is set before any vidtube import: get_settings() is cached on first use.
"""

import os
import tempfile

_scratch = tempfile.mkdtemp(prefix="vidtube-tests-")

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("MEDIA_DIR", os.path.join(_scratch, "media"))
os.environ.setdefault("UPLOAD_TMP_DIR", os.path.join(_scratch, "temp"))
os.environ.setdefault("LOG_FORMAT", "text")
