from rest_framework import serializers
from backoffice.core.formatting import format_currency
from .models import Category, Item


class CategorySerializer(serializers.ModelSerializer):
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ['id', 'name', 'description', 'is_active', 'item_count', 'created_at', 'updated_at']

    def get_item_count(self, obj):
        # Use the annotation when the view provided one
        if hasattr(obj, 'annotated_item_count'):
            return obj.annotated_item_count
        return obj.items.count()

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Category name cannot be blank.')
        return value


class ItemSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    display_code = serializers.CharField(read_only=True)
    sell_price_display = serializers.SerializerMethodField()

    class Meta:
        model = Item
        fields = ['id', 'name', 'category', 'category_name', 'item_code', 'display_code', 'barcode',
                  'sell_price', 'sell_price_display', 'rack_no', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def get_sell_price_display(self, obj):
        return format_currency(obj.sell_price)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Item name cannot be blank.')
        return value

    def validate_barcode(self, value):
        """Empty barcode means no barcode"""
        if value is None:
            return None
        value = value.strip()
        return value or None

    def validate_item_code(self, value):
        if value is None:
            return None
        value = value.strip()
        return value or None

    def validate_sell_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError('Sell price cannot be negative.')
        return value


class LabelRequestItemSerializer(serializers.Serializer):
    item_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(required=False, default=1)


class LabelPrintRequestSerializer(serializers.Serializer):
    items = LabelRequestItemSerializer(many=True, allow_empty=False)
    render = serializers.BooleanField(required=False, default=True)
