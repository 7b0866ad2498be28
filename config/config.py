import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "payroll-sync-dev-key"

    # Local record store: data lives under {DB_ROOT}/SweldoDB
    DB_ROOT = os.environ.get("DB_ROOT", os.path.expanduser("~/payroll-data"))

    # Remote store (Firestore): companies/{COMPANY_NAME}/...
    COMPANY_NAME = os.environ.get("COMPANY_NAME", "DefaultCompany")
    FIREBASE_CREDENTIALS = os.environ.get("FIREBASE_CREDENTIALS", os.environ.get("GOOGLE_APPLICATION_CREDENTIALS", ""))
    FIREBASE_PROJECT_ID = os.environ.get("FIREBASE_PROJECT_ID", "")

    # Sync tuning
    SYNC_BATCH_SIZE = int(os.environ.get("SYNC_BATCH_SIZE", "1"))
    LEDGER_MAX_ENTRIES = int(os.environ.get("LEDGER_MAX_ENTRIES", "500"))
    SYNC_LOG_MAX_ENTRIES = int(os.environ.get("SYNC_LOG_MAX_ENTRIES", "100"))

    @classmethod
    def firebase_config(cls) -> dict:
        return {
            "company_name": cls.COMPANY_NAME,
            "credentials_path": cls.FIREBASE_CREDENTIALS,
            "project_id": cls.FIREBASE_PROJECT_ID,
        }
