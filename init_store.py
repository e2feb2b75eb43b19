#!/usr/bin/env python3
"""
Initializes the database: configuration document and indexes.

Usage:
    python init_store.py
"""
import sys

from rajaoil_admin.config import MONGO_DB
from rajaoil_admin.database import close_client, get_database
from rajaoil_admin.database.bootstrap import ensure_store


def init_store() -> bool:
    try:
        summary = ensure_store(get_database())
    except Exception as e:
        print(f"❌ Error while initializing the database: {e}")
        return False
    finally:
        close_client()

    print(f"🎉 Database '{MONGO_DB}' ready")
    print(f"   Configuration document created: {'yes' if summary['config_created'] else 'no (already there)'}")
    if summary["lists_added"]:
        print(f"   Lists added: {', '.join(summary['lists_added'])}")
    print(f"   Indexes: {', '.join(summary['indexes'])}")
    return True


if __name__ == "__main__":
    sys.exit(0 if init_store() else 1)
