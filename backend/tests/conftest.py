import os
import tempfile

# Settings are read at import time, so pin them before anything imports coachtrack
os.environ.setdefault("SQLALCHEMY_DATABASE_URL", "sqlite://")
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")
os.environ.setdefault("APP_TIMEZONE", "UTC")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="coachtrack-uploads-"))
