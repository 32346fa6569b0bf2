import logging

import pytest
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile

from catalog import assets
from catalog.exceptions import UploadFailed


class BrokenStorage:
    def save(self, name, content):
        raise OSError("bucket unreachable")

    def url(self, name):
        raise AssertionError("url() should not be reached")


def image(name='dish.png', content=b'\x89PNG fake image bytes'):
    return SimpleUploadedFile(name, content, content_type='image/png')


def test_upload_stores_under_folder_with_random_name():
    reference = assets.upload_asset(image(), assets.CATEGORY_FOLDER)

    assert reference.startswith('/media/categories/')
    assert reference.endswith('.png')
    stored_name = reference[len('/media/'):]
    assert default_storage.exists(stored_name)


def test_two_uploads_of_the_same_file_get_distinct_references():
    first = assets.upload_asset(image(), assets.MENU_ITEM_FOLDER)
    second = assets.upload_asset(image(), assets.MENU_ITEM_FOLDER)

    assert first != second


def test_upload_failure_is_raised_as_upload_failed(monkeypatch):
    monkeypatch.setattr(assets, 'default_storage', BrokenStorage())

    with pytest.raises(UploadFailed):
        assets.upload_asset(image(), assets.SPECIAL_OFFER_FOLDER)


def test_resolve_image_without_file_keeps_current():
    assert assets.resolve_image(None, assets.CATEGORY_FOLDER, '/media/categories/old.png') == '/media/categories/old.png'
    assert assets.resolve_image(None, assets.CATEGORY_FOLDER) == ''


def test_resolve_image_ignores_empty_files():
    empty = SimpleUploadedFile('empty.png', b'', content_type='image/png')
    assert assets.resolve_image(empty, assets.CATEGORY_FOLDER, 'kept.png') == 'kept.png'


def test_resolve_image_keeps_current_and_logs_when_upload_fails(monkeypatch, caplog):
    monkeypatch.setattr(assets, 'default_storage', BrokenStorage())

    with caplog.at_level(logging.ERROR, logger='catalog.assets'):
        reference = assets.resolve_image(image(), assets.CATEGORY_FOLDER, 'previous.png')

    assert reference == 'previous.png'
    assert 'Image upload failed' in caplog.text
