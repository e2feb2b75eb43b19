"""
Request-scoped wiring: every accessor is built from the database handle (and
the object storage) injected here, so tests can swap both for in-memory fakes.
"""
from fastapi import Depends

from rajaoil_admin.config import MAX_UPLOAD_SIZE_MB
from rajaoil_admin.database import get_database, get_storage
from rajaoil_admin.repositories.catalog_repo import CatalogRepository
from rajaoil_admin.repositories.contact_form_repo import ContactFormRepository
from rajaoil_admin.repositories.media_repo import MediaLibrary
from rajaoil_admin.repositories.order_repo import OrderRepository
from rajaoil_admin.storage import MediaStorage


def get_db():
    return get_database()


def get_media_storage() -> MediaStorage:
    return get_storage()


def get_order_repository(db=Depends(get_db)) -> OrderRepository:
    return OrderRepository(db)


def get_catalog_repository(db=Depends(get_db)) -> CatalogRepository:
    return CatalogRepository(db)


def get_contact_form_repository(db=Depends(get_db)) -> ContactFormRepository:
    return ContactFormRepository(db)


def get_media_library(db=Depends(get_db), storage: MediaStorage = Depends(get_media_storage)) -> MediaLibrary:
    return MediaLibrary(db, storage, max_upload_bytes=MAX_UPLOAD_SIZE_MB * 1024 * 1024)
