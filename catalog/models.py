import uuid

from django.core.validators import MinValueValidator
from django.db import models


class OrderedModel(models.Model):
    """Base model for records an admin can drag into a manual sequence"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.PositiveIntegerField(default=0, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['order']


class ServingDetails(models.Model):
    weight_grams = models.PositiveIntegerField(null=True, blank=True)
    piece_count = models.PositiveIntegerField(null=True, blank=True)
    skewer_count = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        abstract = True


class CollectionSequence(models.Model):
    """Lock row per ordered collection, serializes appends"""
    collection = models.CharField(max_length=100, unique=True)
    last_value = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.collection} @ {self.last_value}"


# =============== MENU CONTENT ===============

class Category(OrderedModel):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    hero_image = models.CharField(max_length=500, blank=True)
    square_image = models.CharField(max_length=500, blank=True)
    is_featured = models.BooleanField(default=False)

    def __str__(self):
        return self.name

    class Meta(OrderedModel.Meta):
        verbose_name_plural = "Categories"


class MenuItem(OrderedModel, ServingDetails):
    # Deleting a category detaches its items instead of deleting them
    category = models.ForeignKey(
        Category, on_delete=models.SET_NULL, null=True, blank=True, related_name="items"
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    is_featured = models.BooleanField(default=False)
    hero_image = models.CharField(max_length=500, blank=True)
    square_image = models.CharField(max_length=500, blank=True)

    def __str__(self):
        return self.name

    class Meta(OrderedModel.Meta):
        pass


class MenuItemSize(ServingDetails):
    item = models.ForeignKey(MenuItem, on_delete=models.CASCADE, related_name='sizes')
    name = models.CharField(max_length=100)
    price = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    position = models.PositiveIntegerField(default=0)

    def __str__(self):
        return f"{self.item.name} - {self.name}"

    class Meta:
        ordering = ['position', 'id']


class MenuItemAddon(models.Model):
    item = models.ForeignKey(MenuItem, on_delete=models.CASCADE, related_name='addons')
    name = models.CharField(max_length=100)
    price = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    position = models.PositiveIntegerField(default=0)

    def __str__(self):
        return f"{self.item.name} + {self.name}"

    class Meta:
        ordering = ['position', 'id']


class SpecialOffer(OrderedModel):
    headline = models.CharField(max_length=255)
    text = models.TextField(blank=True)
    price_before = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    price_after = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    square_image = models.CharField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)

    def __str__(self):
        return self.headline

    class Meta(OrderedModel.Meta):
        pass
