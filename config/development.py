from config.config import Config

SECRET_KEY = Config.SECRET_KEY

DB_ROOT = Config.DB_ROOT
FIREBASE_CONFIG = Config.firebase_config()

SYNC_BATCH_SIZE = Config.SYNC_BATCH_SIZE
LEDGER_MAX_ENTRIES = Config.LEDGER_MAX_ENTRIES
SYNC_LOG_MAX_ENTRIES = Config.SYNC_LOG_MAX_ENTRIES

DEBUG = True
