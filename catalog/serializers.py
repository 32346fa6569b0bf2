import json

from django.db import transaction
from rest_framework import serializers

from .assets import CATEGORY_FOLDER, MENU_ITEM_FOLDER, SPECIAL_OFFER_FOLDER, resolve_image
from .models import Category, MenuItem, MenuItemAddon, MenuItemSize, SpecialOffer
from .ordering import OrderedCollectionStore


class ServingDetailsSerializer(serializers.Serializer):
    weight_grams = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    piece_count = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    skewer_count = serializers.IntegerField(min_value=0, required=False, allow_null=True)

    def to_representation(self, instance):
        """Leave out details that were never filled in"""
        data = super().to_representation(instance)
        return {key: value for key, value in data.items() if value is not None}


class OrderedModelSerializer(serializers.ModelSerializer):
    """
    Base serializer for ordered entities. New rows are appended to the end of
    their collection, and uploaded files become image references.
    """
    image_folder = None
    image_fields = ()

    def resolve_images(self, validated_data, instance=None):
        for field in self.image_fields:
            upload = validated_data.pop(f'{field}_file', None)
            current = validated_data.get(field, getattr(instance, field, ''))
            validated_data[field] = resolve_image(upload, self.image_folder, current)

    def create(self, validated_data):
        self.resolve_images(validated_data)
        model = self.Meta.model
        return OrderedCollectionStore(model).append(model(**validated_data))

    def update(self, instance, validated_data):
        self.resolve_images(validated_data, instance)
        return super().update(instance, validated_data)


class CategorySerializer(OrderedModelSerializer):
    image_folder = CATEGORY_FOLDER
    image_fields = ('hero_image', 'square_image')

    hero_image_file = serializers.FileField(write_only=True, required=False, allow_empty_file=True)
    square_image_file = serializers.FileField(write_only=True, required=False, allow_empty_file=True)
    items_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = [
            'id', 'name', 'description', 'hero_image', 'square_image', 'is_featured',
            'order', 'created_at', 'items_count', 'hero_image_file', 'square_image_file'
        ]
        read_only_fields = ['order', 'created_at', 'items_count']

    def get_items_count(self, obj):
        # Annotated by list queries
        if hasattr(obj, 'items_count'):
            return obj.items_count
        return obj.items.count()


class MenuItemSizeSerializer(serializers.ModelSerializer):
    serving_details = ServingDetailsSerializer(source='*', required=False)

    class Meta:
        model = MenuItemSize
        fields = ['name', 'price', 'serving_details']


class MenuItemAddonSerializer(serializers.ModelSerializer):
    class Meta:
        model = MenuItemAddon
        fields = ['name', 'price']


class MenuItemSerializer(OrderedModelSerializer):
    image_folder = MENU_ITEM_FOLDER
    image_fields = ('hero_image', 'square_image')
    # Form posts carry these as JSON strings
    json_fields = ('serving_details', 'sizes', 'addons')

    category_name = serializers.CharField(source='category.name', read_only=True)
    serving_details = ServingDetailsSerializer(source='*', required=False)
    sizes = MenuItemSizeSerializer(many=True, required=False)
    addons = MenuItemAddonSerializer(many=True, required=False)
    hero_image_file = serializers.FileField(write_only=True, required=False, allow_empty_file=True)
    square_image_file = serializers.FileField(write_only=True, required=False, allow_empty_file=True)

    class Meta:
        model = MenuItem
        fields = [
            'id', 'name', 'category', 'category_name', 'description', 'price', 'is_featured',
            'hero_image', 'square_image', 'serving_details', 'sizes', 'addons',
            'order', 'created_at', 'hero_image_file', 'square_image_file'
        ]
        read_only_fields = ['order', 'created_at']

    def to_internal_value(self, data):
        if hasattr(data, 'getlist'):
            data = self.decode_form_data(data)
        return super().to_internal_value(data)

    def decode_form_data(self, data):
        """
        Decode the JSON-string fields of a multipart post. Malformed JSON is a
        validation error, not an empty list, so a broken form never silently
        wipes an item's sizes or add-ons.
        """
        decoded = {key: data.get(key) for key in data.keys()}
        errors = {}
        for key in self.json_fields:
            raw = decoded.get(key)
            if not isinstance(raw, str):
                continue
            if not raw.strip():
                decoded.pop(key)
                continue
            try:
                decoded[key] = json.loads(raw)
            except ValueError:
                errors[key] = ["Must be valid JSON."]
        if errors:
            raise serializers.ValidationError(errors)
        return decoded

    def create(self, validated_data):
        sizes_data = validated_data.pop('sizes', [])
        addons_data = validated_data.pop('addons', [])

        with transaction.atomic():
            menu_item = super().create(validated_data)
            self.replace_sizes(menu_item, sizes_data)
            self.replace_addons(menu_item, addons_data)

        return menu_item

    def update(self, instance, validated_data):
        sizes_data = validated_data.pop('sizes', None)
        addons_data = validated_data.pop('addons', None)

        with transaction.atomic():
            instance = super().update(instance, validated_data)
            # Sizes and add-ons are replaced wholesale when supplied
            if sizes_data is not None:
                self.replace_sizes(instance, sizes_data)
            if addons_data is not None:
                self.replace_addons(instance, addons_data)

        return instance

    def replace_sizes(self, menu_item, sizes_data):
        menu_item.sizes.all().delete()
        for position, size_data in enumerate(sizes_data):
            MenuItemSize.objects.create(item=menu_item, position=position, **size_data)

    def replace_addons(self, menu_item, addons_data):
        menu_item.addons.all().delete()
        for position, addon_data in enumerate(addons_data):
            MenuItemAddon.objects.create(item=menu_item, position=position, **addon_data)


class SpecialOfferSerializer(OrderedModelSerializer):
    image_folder = SPECIAL_OFFER_FOLDER
    image_fields = ('square_image',)

    square_image_file = serializers.FileField(write_only=True, required=False, allow_empty_file=True)

    class Meta:
        model = SpecialOffer
        fields = [
            'id', 'headline', 'text', 'price_before', 'price_after', 'square_image',
            'is_active', 'order', 'created_at', 'square_image_file'
        ]
        read_only_fields = ['order', 'created_at']


# =============== ORDERING PAYLOADS ===============

class OrderPairSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    order = serializers.IntegerField(min_value=0)


class ReorderSerializer(serializers.Serializer):
    items = OrderPairSerializer(many=True, allow_empty=True)

    def get_pairs(self):
        return [(pair['id'], pair['order']) for pair in self.validated_data['items']]


class MoveSerializer(serializers.Serializer):
    source_id = serializers.UUIDField()
    destination_id = serializers.UUIDField()
