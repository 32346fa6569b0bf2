from django.urls import path
from . import views


urlpatterns = [
    # Category URLs
    path('categories/', views.CategoryListCreateView.as_view(), name='category-list-create'),
    path('categories/reorder/', views.CategoryReorderView.as_view(), name='category-reorder'),
    path('categories/move/', views.CategoryMoveView.as_view(), name='category-move'),
    path('categories/<uuid:pk>/', views.CategoryRetrieveUpdateDestroyView.as_view(), name='category-detail'),

    # Menu Item URLs
    path('items/', views.MenuItemListCreateView.as_view(), name='menu-item-list-create'),
    path('items/reorder/', views.MenuItemReorderView.as_view(), name='menu-item-reorder'),
    path('items/move/', views.MenuItemMoveView.as_view(), name='menu-item-move'),
    path('items/<uuid:pk>/', views.MenuItemRetrieveUpdateDestroyView.as_view(), name='menu-item-detail'),

    # Special Offer URLs
    path('offers/', views.SpecialOfferListCreateView.as_view(), name='offer-list-create'),
    path('offers/active/', views.active_offers, name='offer-active'),
    path('offers/reorder/', views.SpecialOfferReorderView.as_view(), name='offer-reorder'),
    path('offers/move/', views.SpecialOfferMoveView.as_view(), name='offer-move'),
    path('offers/<uuid:pk>/', views.SpecialOfferRetrieveUpdateDestroyView.as_view(), name='offer-detail'),

    # Public menu
    path('public/', views.public_menu, name='public-menu'),
]
