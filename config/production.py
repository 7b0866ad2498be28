import os

from config.config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_ROOT = Config.DB_ROOT
FIREBASE_CONFIG = Config.firebase_config()

# Larger chunks in production; still bounded to keep load on the store low.
SYNC_BATCH_SIZE = int(os.getenv("SYNC_BATCH_SIZE", "5"))
LEDGER_MAX_ENTRIES = Config.LEDGER_MAX_ENTRIES
SYNC_LOG_MAX_ENTRIES = Config.SYNC_LOG_MAX_ENTRIES

DEBUG = False
