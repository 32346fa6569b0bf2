from django.conf import settings
from django.db.models import Count
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from rest_framework import generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from authentication.permissions import IsMenuAdmin
from .models import Category, MenuItem, SpecialOffer
from .ordering import OrderedCollectionStore, ReorderController, SpecialOfferStore
from .serializers import (
    CategorySerializer, MenuItemSerializer, SpecialOfferSerializer,
    ReorderSerializer, MoveSerializer
)


class OrderedCollectionMixin:
    """Mixin routing reads, appends and deletes through the collection's store"""
    store_class = OrderedCollectionStore

    def get_store(self):
        return self.store_class(self.queryset.model)

    def get_permissions(self):
        if self.request.method in ['POST', 'PUT', 'PATCH', 'DELETE']:
            return [IsMenuAdmin()]
        return [AllowAny()]


class OrderedListCreateView(OrderedCollectionMixin, generics.ListCreateAPIView):

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        entities = self.get_store().list_ordered(queryset)
        serializer = self.get_serializer(entities, many=True)
        return Response(serializer.data)


class OrderedRetrieveUpdateDestroyView(OrderedCollectionMixin, generics.RetrieveUpdateDestroyAPIView):

    def perform_destroy(self, instance):
        self.get_store().remove(instance.pk)


class OrderedReorderView(OrderedCollectionMixin, generics.GenericAPIView):
    """
    post: Persist a full (id, order) list in one atomic batch (admins only)
    """

    @extend_schema(
        summary="Reassign order",
        request=ReorderSerializer,
        responses={204: None, 409: {'description': 'Batch rejected, nothing was applied'}},
    )
    def post(self, request, *args, **kwargs):
        payload = ReorderSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        self.get_store().reassign_order(payload.get_pairs())
        return Response(status=status.HTTP_204_NO_CONTENT)


class OrderedMoveView(OrderedCollectionMixin, generics.GenericAPIView):
    """
    post: Move one entity onto another's position and return the new sequence
    right away. The order write happens in the background (admins only).
    """

    @extend_schema(summary="Move one entity", request=MoveSerializer)
    def post(self, request, *args, **kwargs):
        payload = MoveSerializer(data=request.data)
        payload.is_valid(raise_exception=True)

        store = self.get_store()
        sequence = ReorderController(store).handle_move(
            store.list_ordered(self.get_queryset()),
            payload.validated_data['source_id'],
            payload.validated_data['destination_id'],
        )
        serializer = self.get_serializer(sequence, many=True)
        return Response(serializer.data)


# Category Views
class CategoryListCreateView(OrderedListCreateView):
    """
    get: List all categories in display order
    post: Create a category at the end of the list (admins only)
    """
    queryset = Category.objects.annotate(items_count=Count('items'))
    serializer_class = CategorySerializer
    filterset_fields = ['is_featured']


class CategoryRetrieveUpdateDestroyView(OrderedRetrieveUpdateDestroyView):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer


class CategoryReorderView(OrderedReorderView):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer


class CategoryMoveView(OrderedMoveView):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer


# Menu Item Views
class MenuItemListCreateView(OrderedListCreateView):
    """
    get: List all menu items in display order
    post: Create a menu item with sizes and add-ons (admins only)
    """
    queryset = MenuItem.objects.select_related('category').prefetch_related('sizes', 'addons')
    serializer_class = MenuItemSerializer
    filterset_fields = ['category', 'is_featured']


class MenuItemRetrieveUpdateDestroyView(OrderedRetrieveUpdateDestroyView):
    queryset = MenuItem.objects.select_related('category').prefetch_related('sizes', 'addons')
    serializer_class = MenuItemSerializer


class MenuItemReorderView(OrderedReorderView):
    queryset = MenuItem.objects.all()
    serializer_class = MenuItemSerializer


class MenuItemMoveView(OrderedMoveView):
    queryset = MenuItem.objects.select_related('category').prefetch_related('sizes', 'addons')
    serializer_class = MenuItemSerializer


# Special Offer Views
class SpecialOfferListCreateView(OrderedListCreateView):
    queryset = SpecialOffer.objects.all()
    serializer_class = SpecialOfferSerializer
    store_class = SpecialOfferStore
    filterset_fields = ['is_active']


class SpecialOfferRetrieveUpdateDestroyView(OrderedRetrieveUpdateDestroyView):
    queryset = SpecialOffer.objects.all()
    serializer_class = SpecialOfferSerializer
    store_class = SpecialOfferStore


class SpecialOfferReorderView(OrderedReorderView):
    queryset = SpecialOffer.objects.all()
    serializer_class = SpecialOfferSerializer
    store_class = SpecialOfferStore


class SpecialOfferMoveView(OrderedMoveView):
    queryset = SpecialOffer.objects.all()
    serializer_class = SpecialOfferSerializer
    store_class = SpecialOfferStore


# Public menu views
@extend_schema(
    summary="Active special offers",
    parameters=[
        OpenApiParameter(
            name='limit',
            type=OpenApiTypes.INT,
            location=OpenApiParameter.QUERY,
            description='Maximum number of offers to return',
        )
    ],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def active_offers(request):
    """Active offers in display order, as shown on the landing page"""
    try:
        limit = int(request.GET.get('limit', settings.MENUBOARD_ACTIVE_OFFERS_LIMIT))
    except ValueError:
        limit = -1
    if limit < 0:
        return Response(
            {"detail": "limit must be a non-negative integer"},
            status=status.HTTP_400_BAD_REQUEST
        )

    offers = SpecialOfferStore(SpecialOffer).list_active(limit)
    serializer = SpecialOfferSerializer(offers, many=True, context={'request': request})
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([AllowAny])
def public_menu(request):
    """Categories and items in display order for the menu browser"""
    categories = OrderedCollectionStore(Category).list_ordered(
        Category.objects.annotate(items_count=Count('items'))
    )
    items = OrderedCollectionStore(MenuItem).list_ordered(
        MenuItem.objects.select_related('category').prefetch_related('sizes', 'addons')
    )
    return Response({
        'categories': CategorySerializer(categories, many=True, context={'request': request}).data,
        'items': MenuItemSerializer(items, many=True, context={'request': request}).data,
    })
