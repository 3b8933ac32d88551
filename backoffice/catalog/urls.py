from django.urls import path
from .views import (
    category_list_create, category_detail,
    item_list_create, item_detail, item_code_preview, item_generate_barcode,
    label_print,
)

urlpatterns = [
    # Category endpoints
    path('categories/', category_list_create, name='category-list-create'),
    path('categories/<int:pk>/', category_detail, name='category-detail'),

    # Item endpoints
    path('items/', item_list_create, name='item-list-create'),
    path('items/code-preview/', item_code_preview, name='item-code-preview'),
    path('items/generate-barcode/', item_generate_barcode, name='item-generate-barcode'),
    path('items/<int:pk>/', item_detail, name='item-detail'),

    # Label printing
    path('labels/print/', label_print, name='label-print'),
]
