import pytest
from rest_framework.test import APIClient

from catalog.models import Category, MenuItem, SpecialOffer
from catalog.ordering import OrderedCollectionStore, SpecialOfferStore


@pytest.fixture(autouse=True)
def menuboard_settings(settings):
    # Background reorders run on the calling thread so their writes are visible to the test
    settings.MENUBOARD_REORDER_DISPATCH = 'inline'
    settings.STORAGES = {
        'default': {
            'BACKEND': 'django.core.files.storage.InMemoryStorage',
        },
        'staticfiles': {
            'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
        },
    }
    settings.MEDIA_URL = '/media/'
    return settings


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def menu_admin(django_user_model):
    return django_user_model.objects.create_user(
        username='menu-admin', password='Secret123!', is_staff=True
    )


@pytest.fixture
def admin_api_client(menu_admin):
    client = APIClient()
    client.force_authenticate(user=menu_admin)
    return client


@pytest.fixture
def category_store():
    return OrderedCollectionStore(Category)


@pytest.fixture
def item_store():
    return OrderedCollectionStore(MenuItem)


@pytest.fixture
def offer_store():
    return SpecialOfferStore(SpecialOffer)


@pytest.fixture
def categories(category_store):
    """Starters, Mains, Desserts appended in that order"""
    return [category_store.append(Category(name=name)) for name in ('Starters', 'Mains', 'Desserts')]
