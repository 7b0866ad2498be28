"""Example: run the sync engine without Flask.

Pushes attendance with an in-process store so no Firebase project is needed.
"""

import importlib

from config import get_settings_module

from src.payroll_sync.payroll_sync.container import build_container
from src.payroll_sync.payroll_sync.entities.attendance import AttendanceDay
from src.payroll_sync.payroll_sync.sync.identity import GroupKey


class PrintingStore:
    delete_field = object()

    def __init__(self):
        self.docs = {}

    def get_document(self, collection, doc_id):
        return self.docs.get((collection, doc_id))

    def set_document(self, collection, doc_id, data, *, merge=True):
        print(f"set {collection}/{doc_id}: {data}")
        self.docs[(collection, doc_id)] = data

    def list_documents(self, collection):
        return [(d, v) for (c, d), v in self.docs.items() if c == collection]


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_root=settings.DB_ROOT, remote=PrintingStore())

    key = GroupKey("EMP001", 2024, 1)
    container.repositories["attendance"].save_or_update(
        [AttendanceDay("EMP001", 2024, 1, 1, time_in="09:00", time_out="17:00")], key
    )
    container.adapters["attendance"].sync_to_firestore(print)


if __name__ == "__main__":
    main()
