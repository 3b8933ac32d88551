from django.contrib import admin, messages
from .models import Category, Item
from .utils import ItemCodeConflict, assign_item_code


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'is_active', 'created_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['name']
    ordering = ['name']


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'display_code', 'category', 'barcode', 'sell_price', 'is_active', 'created_at']
    list_filter = ['is_active', 'category', 'created_at']
    search_fields = ['name', 'item_code', 'barcode']
    ordering = ['name']
    readonly_fields = ['created_at', 'updated_at']
    actions = ['assign_missing_item_codes']

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        if not obj.item_code:
            try:
                assign_item_code(obj)
            except ItemCodeConflict as e:
                # The item is kept without a stored code; it still displays the generated one
                self.message_user(request, f'{e}. Set an item code for "{obj.name}" manually.', level=messages.WARNING)

    @admin.action(description='Assign item codes to selected items without one')
    def assign_missing_item_codes(self, request, queryset):
        updated = 0
        skipped = []
        for item in queryset.select_related('category').filter(item_code__isnull=True):
            try:
                assign_item_code(item)
                updated += 1
            except ItemCodeConflict as e:
                skipped.append(e.item_code)
        self.message_user(request, f'{updated} item code(s) assigned.')
        if skipped:
            self.message_user(
                request,
                f'{len(skipped)} item(s) skipped, code already in use: {", ".join(skipped)}',
                level=messages.WARNING,
            )
