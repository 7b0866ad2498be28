import os
import tempfile

SECRET_KEY = "test-secret"

DB_ROOT = os.getenv("DB_ROOT", tempfile.gettempdir())
FIREBASE_CONFIG = {"company_name": "TestCompany", "credentials_path": "", "project_id": ""}

SYNC_BATCH_SIZE = 1
LEDGER_MAX_ENTRIES = 50
SYNC_LOG_MAX_ENTRIES = 100

DEBUG = False
TESTING = True
