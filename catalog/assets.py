import logging
import os
import uuid

from django.core.files.storage import default_storage

from .exceptions import UploadFailed

logger = logging.getLogger(__name__)

CATEGORY_FOLDER = 'categories'
MENU_ITEM_FOLDER = 'menu-items'
SPECIAL_OFFER_FOLDER = 'special-offers'


def upload_asset(file, folder):
    """Store an uploaded image under ``folder`` and return its public reference"""
    extension = os.path.splitext(file.name or '')[1].lower()
    name = f"{folder}/{uuid.uuid4()}{extension}"
    try:
        saved_name = default_storage.save(name, file)
        return default_storage.url(saved_name)
    except Exception as exc:
        raise UploadFailed(f"Could not store {file.name} in {folder}: {exc}") from exc


def resolve_image(file, folder, current=''):
    """
    Reference to keep on the entity after a save. A failed upload is logged and
    the previous reference is kept so the rest of the entity still saves.
    """
    if not file or not file.size:
        return current or ''
    try:
        return upload_asset(file, folder)
    except UploadFailed as exc:
        logger.error(f"Image upload failed: {exc}")
        return current or ''
