import logging
import math
from django.db import transaction
from django.db.models import Count
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from .filters import ItemFilter, resolve_item_ordering
from .label_generator import build_label_sheet, render_label_sheet
from .models import Category, Item
from .serializers import CategorySerializer, ItemSerializer, LabelPrintRequestSerializer
from .utils import ItemCodeConflict, assign_item_code, generate_item_code, generate_unique_barcode

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def parse_positive_int(value, name, default):
    """Parse a query parameter as an integer >= 1, raising ValueError with a message"""
    if value is None or value == '':
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f'{name} must be an integer')
    if number < 1:
        raise ValueError(f'{name} must be at least 1')
    return number


# Category views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def category_list_create(request):
    """List all categories or create a new category"""
    if request.method == 'GET':
        categories = Category.objects.annotate(annotated_item_count=Count('items'))
        serializer = CategorySerializer(categories, many=True)
        return Response(serializer.data)
    else:
        serializer = CategorySerializer(data=request.data)
        if serializer.is_valid():
            category = serializer.save()
            logger.info(f"Category created: {category.name} (id={category.pk}) by {request.user.username}")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def category_detail(request, pk):
    """Retrieve, update or delete a category"""
    category = get_object_or_404(Category, pk=pk)

    if request.method == 'GET':
        serializer = CategorySerializer(category)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CategorySerializer(category, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        logger.info(f"Category deleted: {category.name} (id={category.pk}) by {request.user.username}")
        category.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Item views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def item_list_create(request):
    """
    List items or create a new item.

    GET query parameters:
        search: substring of name, item code or barcode (case-insensitive)
        category: category id
        active: true/false
        ordering: name, item_code, category_name, sell_price, created_at ("-" prefix for descending)
        page: 1-based page number (default 1)
        limit: page size (default 10, max 100)

    POST creates the item and then assigns its category-based item code,
    unless the request supplied one.
    """
    if request.method == 'GET':
        try:
            page = parse_positive_int(request.query_params.get('page'), 'page', 1)
            limit = parse_positive_int(request.query_params.get('limit'), 'limit', DEFAULT_PAGE_SIZE)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        limit = min(limit, MAX_PAGE_SIZE)

        queryset = Item.objects.select_related('category')
        item_filter = ItemFilter(request.query_params, queryset=queryset)
        if not item_filter.is_valid():
            return Response(item_filter.errors, status=status.HTTP_400_BAD_REQUEST)
        queryset = item_filter.qs.order_by(*resolve_item_ordering(request.query_params.get('ordering')))

        count = queryset.count()
        total_pages = math.ceil(count / limit) if count else 0
        offset = (page - 1) * limit
        serializer = ItemSerializer(queryset[offset:offset + limit], many=True)

        return Response({
            'count': count,
            'page': page,
            'limit': limit,
            'total_pages': total_pages,
            'next': page + 1 if page < total_pages else None,
            'previous': page - 1 if page > 1 else None,
            'results': serializer.data,
        })
    else:
        serializer = ItemSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        # The generated code embeds the primary key, so it is assigned after insert;
        # a conflicting code rolls the insert back
        try:
            with transaction.atomic():
                item = serializer.save()
                assign_item_code(item)
        except ItemCodeConflict as e:
            return Response({
                'error': f'{str(e)}. Supply an item_code for this item.',
                'item_code': e.item_code,
            }, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f"Item created: {item.name} ({item.item_code}) by {request.user.username}")
        return Response(ItemSerializer(item).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def item_detail(request, pk):
    """Retrieve, update or delete an item"""
    item = get_object_or_404(Item.objects.select_related('category'), pk=pk)

    if request.method == 'GET':
        serializer = ItemSerializer(item)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ItemSerializer(item, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        logger.info(f"Item deleted: {item.name} (id={item.pk}) by {request.user.username}")
        item.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def item_code_preview(request):
    """
    Preview the item code for an item id and (optional) category.

    Query parameters:
        item_id: non-negative integer (required)
        category: category id (optional)
        item_code: existing code (optional, returned unchanged when set)
    """
    raw_item_id = request.query_params.get('item_id')
    try:
        item_id = int(raw_item_id)
    except (TypeError, ValueError):
        return Response({'error': 'item_id must be an integer'}, status=status.HTTP_400_BAD_REQUEST)
    if item_id < 0:
        return Response({'error': 'item_id cannot be negative'}, status=status.HTTP_400_BAD_REQUEST)

    category_name = None
    category_id = request.query_params.get('category')
    if category_id:
        try:
            category_pk = int(category_id)
        except ValueError:
            return Response({'error': 'category must be an integer'}, status=status.HTTP_400_BAD_REQUEST)
        category_name = get_object_or_404(Category, pk=category_pk).name

    item_code = generate_item_code(category_name, item_id, request.query_params.get('item_code'))
    return Response({'item_code': item_code})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def item_generate_barcode(request):
    """Generate a barcode value not used by any item"""
    try:
        return Response({'barcode': generate_unique_barcode()})
    except RuntimeError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def label_print(request):
    """
    Build a barcode label sheet.

    Request body:
        items: [{"item_id": 1, "quantity": 2}, ...]
        render: include PNG data URLs for each label (default true)
    """
    request_serializer = LabelPrintRequestSerializer(data=request.data)
    if not request_serializer.is_valid():
        return Response(request_serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    requested = request_serializer.validated_data['items']
    item_ids = [entry['item_id'] for entry in requested]
    items = Item.objects.select_related('category').in_bulk(item_ids)

    missing = sorted({item_id for item_id in item_ids if item_id not in items})
    if missing:
        return Response({
            'error': 'Some items were not found',
            'missing_item_ids': missing,
        }, status=status.HTTP_400_BAD_REQUEST)

    labels = build_label_sheet([(items[entry['item_id']], entry['quantity']) for entry in requested])

    if request_serializer.validated_data['render']:
        try:
            labels = render_label_sheet(labels)
        except Exception as e:
            logger.error(f"Label sheet rendering failed: {str(e)}", exc_info=True)
            return Response({
                'error': f'Failed to generate labels: {str(e)}'
            }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'total_labels': len(labels),
        'labels': labels,
    })
