"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DB_FOLDER = "SweldoDB"
DEFAULT_COMPANY_NAME = "DefaultCompany"
COMPANIES_COLLECTION = "companies"

DEFAULT_BATCH_SIZE = 1
DEFAULT_LEDGER_MAX_ENTRIES = 500
SYNC_LOG_MAX_ENTRIES = 100
DEFAULT_LOG_LIMIT = 20

META_FIELD = "meta"
LAST_MODIFIED_FIELD = "lastModified"
BACKUP_MARKER = "_backup"
