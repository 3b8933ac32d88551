from django.db import models
from .utils import get_display_item_code


class Category(models.Model):
    """Item categories"""
    name = models.CharField(max_length=200, unique=True, db_index=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'categories'
        verbose_name_plural = 'categories'
        ordering = ['name']


class Item(models.Model):
    """Item master"""
    name = models.CharField(max_length=200, db_index=True)
    category = models.ForeignKey(Category, on_delete=models.SET_NULL, null=True, blank=True, related_name='items')
    item_code = models.CharField(max_length=50, unique=True, null=True, blank=True, db_index=True,
                                 help_text='Category-based display code (e.g., GI7). Assigned after creation.')
    barcode = models.CharField(max_length=100, unique=True, null=True, blank=True, db_index=True)
    sell_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    rack_no = models.CharField(max_length=50, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.item_code or 'NO-CODE'})"

    @property
    def display_code(self):
        """Stored item code, or the generated fallback for items without one"""
        return get_display_item_code(self)

    @property
    def label_barcode_value(self):
        """Value encoded in the printed barcode: the item's barcode, else its code"""
        return self.barcode or self.display_code

    def save(self, *args, **kwargs):
        # Blank codes from forms are stored as NULL so unique constraints ignore them
        if self.item_code == '':
            self.item_code = None
        if self.barcode == '':
            self.barcode = None
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'items'
        ordering = ['name']
