"""
Test suite for Catalog module
Tests: item code generation, item/category API, listing filters, barcode labels, admin actions, backfill command
"""
import base64
import io
from decimal import Decimal
from unittest.mock import patch
from django.contrib import admin, messages
from django.core.management import call_command
from django.test import RequestFactory, SimpleTestCase, TestCase, override_settings
from PIL import Image
from rest_framework import status
from backoffice.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backoffice.catalog.admin import ItemAdmin
from backoffice.catalog.filters import resolve_item_ordering
from backoffice.catalog.label_generator import build_label_sheet, generate_label_image, truncate_name
from backoffice.catalog.models import Item
from backoffice.catalog.utils import ItemCodeConflict, assign_item_code, generate_item_code, generate_unique_barcode


class GenerateItemCodeTests(SimpleTestCase):
    """Test the pure item code generator"""

    def test_existing_code_takes_precedence(self):
        self.assertEqual(generate_item_code('Gift Item', 7, 'CUSTOM-1'), 'CUSTOM-1')
        self.assertEqual(generate_item_code(None, 0, 'X'), 'X')
        self.assertEqual(generate_item_code('', 99, 'ABC'), 'ABC')

    def test_empty_existing_code_is_ignored(self):
        self.assertEqual(generate_item_code('Grocery', 5, ''), 'GR5')
        self.assertEqual(generate_item_code('Grocery', 5, None), 'GR5')

    def test_missing_category_falls_back_to_item_prefix(self):
        self.assertEqual(generate_item_code(None, 42), 'ITEM-42')
        self.assertEqual(generate_item_code('', 42), 'ITEM-42')

    def test_whitespace_only_category_uses_xx_prefix(self):
        self.assertEqual(generate_item_code('   ', 5), 'XX5')
        self.assertEqual(generate_item_code('\t\n', 8), 'XX8')

    def test_two_word_category(self):
        self.assertEqual(generate_item_code('Gift Item', 7), 'GI7')

    def test_more_than_two_words_uses_first_two(self):
        self.assertEqual(generate_item_code('home and garden', 12), 'HA12')

    def test_single_multi_letter_word(self):
        self.assertEqual(generate_item_code('Grocery', 100), 'GR100')
        self.assertEqual(generate_item_code('tv', 1), 'TV1')

    def test_single_letter_word(self):
        self.assertEqual(generate_item_code('A', 3), 'AX3')
        self.assertEqual(generate_item_code('b', 4), 'BX4')

    def test_repeated_whitespace_is_collapsed(self):
        self.assertEqual(generate_item_code('Home   Decor', 9), 'HD9')
        self.assertEqual(generate_item_code('  Home \t Decor  ', 9), 'HD9')

    def test_leading_and_trailing_whitespace_is_trimmed(self):
        self.assertEqual(generate_item_code('  Grocery  ', 2), 'GR2')

    def test_non_letter_characters_are_kept(self):
        self.assertEqual(generate_item_code('!!', 1), '!!1')
        self.assertEqual(generate_item_code('2024 Stock', 6), '2S6')

    def test_characters_are_code_points(self):
        self.assertEqual(generate_item_code('épicerie', 1), 'ÉP1')
        self.assertEqual(generate_item_code('\U0001F381 Gifts', 2), '\U0001F381G2')

    def test_unicode_spaces_separate_words(self):
        self.assertEqual(generate_item_code('Gift\u3000Item', 2), 'GI2')
        self.assertEqual(generate_item_code('Home\u2003\u00a0Decor', 3), 'HD3')

    def test_byte_order_mark_is_trimmed(self):
        self.assertEqual(generate_item_code('\ufeffGrocery\ufeff', 1), 'GR1')
        self.assertEqual(generate_item_code('\ufeff', 4), 'XX4')

    def test_control_separators_are_not_whitespace(self):
        self.assertEqual(generate_item_code('Home\x1fDecor', 3), 'HO3')
        self.assertEqual(generate_item_code('\x1cGrocery', 5), '\x1cG5')

    def test_edge_ids(self):
        self.assertEqual(generate_item_code('Grocery', 0), 'GR0')
        self.assertEqual(generate_item_code('Grocery', 10 ** 20), 'GR100000000000000000000')
        self.assertEqual(generate_item_code(None, 0), 'ITEM-0')

    def test_same_inputs_same_output(self):
        first = generate_item_code('Gift Item', 7)
        second = generate_item_code('Gift Item', 7)
        self.assertEqual(first, second)

    def test_result_is_never_empty(self):
        for name in [None, '', ' ', 'a', 'ab', 'a b', '!!', '\xa0']:
            with self.subTest(name=name):
                code = generate_item_code(name, 1)
                self.assertIsInstance(code, str)
                self.assertTrue(code)


class ItemModelTests(TestCase):
    """Test Item model helpers and code assignment"""

    def test_display_code_falls_back_to_generated(self):
        category = TestDataFactory.create_category(name='Gift Item')
        item = TestDataFactory.create_item(category=category)
        self.assertIsNone(item.item_code)
        self.assertEqual(item.display_code, f'GI{item.pk}')

    def test_display_code_without_category(self):
        item = TestDataFactory.create_item(with_category=False)
        self.assertEqual(item.display_code, f'ITEM-{item.pk}')

    def test_display_code_prefers_stored_code(self):
        item = TestDataFactory.create_item(item_code='LEGACY-9')
        self.assertEqual(item.display_code, 'LEGACY-9')

    def test_label_barcode_value(self):
        category = TestDataFactory.create_category(name='Grocery')
        with_barcode = TestDataFactory.create_item(category=category, barcode='8901234567890')
        without_barcode = TestDataFactory.create_item(category=category)
        self.assertEqual(with_barcode.label_barcode_value, '8901234567890')
        self.assertEqual(without_barcode.label_barcode_value, f'GR{without_barcode.pk}')

    def test_blank_codes_are_stored_as_null(self):
        first = TestDataFactory.create_item(item_code='', barcode='')
        second = TestDataFactory.create_item(item_code='', barcode='')
        first.refresh_from_db()
        second.refresh_from_db()
        self.assertIsNone(first.item_code)
        self.assertIsNone(second.barcode)

    def test_assign_item_code_persists(self):
        category = TestDataFactory.create_category(name='Home Decor')
        item = TestDataFactory.create_item(category=category)
        code = assign_item_code(item)
        item.refresh_from_db()
        self.assertEqual(code, f'HD{item.pk}')
        self.assertEqual(item.item_code, code)

    def test_assign_item_code_keeps_existing(self):
        item = TestDataFactory.create_item(item_code='KEEP-1')
        self.assertEqual(assign_item_code(item), 'KEEP-1')

    def test_assign_item_code_requires_saved_item(self):
        with self.assertRaises(ValueError):
            assign_item_code(Item(name='Unsaved'))

    def test_assign_item_code_conflict_leaves_item_unchanged(self):
        category = TestDataFactory.create_category(name='Grocery')
        item = TestDataFactory.create_item(category=category)
        TestDataFactory.create_item(item_code=f'GR{item.pk}')

        with self.assertRaises(ItemCodeConflict) as ctx:
            assign_item_code(item)

        self.assertEqual(ctx.exception.item_code, f'GR{item.pk}')
        self.assertIsNone(item.item_code)
        item.refresh_from_db()
        self.assertIsNone(item.item_code)

    def test_generate_unique_barcode(self):
        barcode = generate_unique_barcode()
        self.assertEqual(len(barcode), 12)
        self.assertTrue(barcode.isdigit())

    def test_generate_unique_barcode_gives_up(self):
        TestDataFactory.create_item(barcode='260101000001')
        with patch('backoffice.catalog.utils.timezone') as mock_tz, \
                patch('backoffice.catalog.utils.random.randint', return_value=1):
            mock_tz.now.return_value.strftime.return_value = '260101'
            with self.assertRaises(RuntimeError):
                generate_unique_barcode(max_attempts=3)


class CategoryAPITests(TestCase):
    """Test Category API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/categories/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_and_list_categories(self):
        response = self.client.post('/api/v1/categories/', {'name': '  Grocery '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Grocery')

        response = self.client.get('/api/v1/categories/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['name'] for c in response.data], ['Grocery'])
        self.assertEqual(response.data[0]['item_count'], 0)

    def test_duplicate_category_name_rejected(self):
        TestDataFactory.create_category(name='Grocery')
        response = self.client.post('/api/v1/categories/', {'name': 'Grocery'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_and_delete_category(self):
        category = TestDataFactory.create_category(name='Toys')
        response = self.client.patch(f'/api/v1/categories/{category.pk}/', {'name': 'Toy Store'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Toy Store')

        item = TestDataFactory.create_item(category=category)
        response = self.client.delete(f'/api/v1/categories/{category.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        item.refresh_from_db()
        self.assertIsNone(item.category)


class ItemAPITests(TestCase):
    """Test Item API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.grocery = TestDataFactory.create_category(name='Grocery')
        self.gifts = TestDataFactory.create_category(name='Gift Item')

    def test_create_item_assigns_code(self):
        data = {'name': 'Basmati Rice', 'category': self.grocery.pk, 'sell_price': '120.00', 'barcode': ''}
        response = self.client.post('/api/v1/items/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        item = Item.objects.get(pk=response.data['id'])
        self.assertEqual(item.item_code, f'GR{item.pk}')
        self.assertIsNone(item.barcode)
        self.assertEqual(response.data['item_code'], f'GR{item.pk}')
        self.assertEqual(response.data['category_name'], 'Grocery')

    @override_settings(CURRENCY_SYMBOL='₹')
    def test_item_payload_has_formatted_price(self):
        response = self.client.post('/api/v1/items/', {'name': 'Mug', 'sell_price': '1250.5'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['sell_price_display'], '₹1,250.50')
        self.assertEqual(response.data['item_code'], f"ITEM-{response.data['id']}")

    def test_create_item_keeps_supplied_code(self):
        data = {'name': 'Greeting Card', 'category': self.gifts.pk, 'item_code': 'CARD-01'}
        response = self.client.post('/api/v1/items/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['item_code'], 'CARD-01')

    def test_create_item_rejects_negative_price(self):
        response = self.client.post('/api/v1/items/', {'name': 'Bad', 'sell_price': '-1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Item.objects.filter(name='Bad').exists())

    def test_create_item_rejects_duplicate_barcode(self):
        TestDataFactory.create_item(barcode='111')
        response = self.client.post('/api/v1/items/', {'name': 'Dup', 'barcode': '111'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_items_paginated(self):
        for i in range(12):
            TestDataFactory.create_item(name=f'Item {i:02d}', category=self.grocery)
        response = self.client.get('/api/v1/items/?limit=5&page=3')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 12)
        self.assertEqual(response.data['total_pages'], 3)
        self.assertEqual(response.data['previous'], 2)
        self.assertIsNone(response.data['next'])
        self.assertEqual([r['name'] for r in response.data['results']], ['Item 10', 'Item 11'])

    def test_list_items_invalid_page(self):
        response = self.client.get('/api/v1/items/?page=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/v1/items/?limit=0')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_items_limit_is_capped(self):
        response = self.client.get('/api/v1/items/?limit=1000')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['limit'], 100)

    def test_list_items_search_by_name_code_and_barcode(self):
        rice = TestDataFactory.create_item(name='Basmati Rice', category=self.grocery)
        TestDataFactory.create_item(name='Teddy Bear', category=self.gifts, item_code='TOY-7')
        TestDataFactory.create_item(name='Candle', category=self.gifts, barcode='8900001112223')

        response = self.client.get('/api/v1/items/?search=rice')
        self.assertEqual([r['id'] for r in response.data['results']], [rice.pk])

        response = self.client.get('/api/v1/items/?search=toy-')
        self.assertEqual([r['name'] for r in response.data['results']], ['Teddy Bear'])

        response = self.client.get('/api/v1/items/?search=0001112')
        self.assertEqual([r['name'] for r in response.data['results']], ['Candle'])

    def test_list_items_filter_by_category(self):
        TestDataFactory.create_item(name='Rice', category=self.grocery)
        TestDataFactory.create_item(name='Bear', category=self.gifts)
        response = self.client.get(f'/api/v1/items/?category={self.gifts.pk}')
        self.assertEqual([r['name'] for r in response.data['results']], ['Bear'])

    def test_list_items_ordering(self):
        TestDataFactory.create_item(name='Apple', category=self.grocery, sell_price=Decimal('30'))
        TestDataFactory.create_item(name='Banana', category=self.grocery, sell_price=Decimal('10'))
        TestDataFactory.create_item(name='Cherry', category=self.grocery, sell_price=Decimal('20'))

        response = self.client.get('/api/v1/items/?ordering=-name')
        self.assertEqual([r['name'] for r in response.data['results']], ['Cherry', 'Banana', 'Apple'])

        response = self.client.get('/api/v1/items/?ordering=sell_price')
        self.assertEqual([r['name'] for r in response.data['results']], ['Banana', 'Cherry', 'Apple'])

        response = self.client.get('/api/v1/items/?ordering=not_a_field')
        self.assertEqual([r['name'] for r in response.data['results']], ['Apple', 'Banana', 'Cherry'])

    def test_listing_shows_generated_code_for_items_without_one(self):
        item = TestDataFactory.create_item(name='Old Stock', category=self.gifts)
        response = self.client.get(f'/api/v1/items/{item.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['item_code'])
        self.assertEqual(response.data['display_code'], f'GI{item.pk}')

    def test_update_and_delete_item(self):
        item = TestDataFactory.create_item(name='Pen', category=self.grocery)
        response = self.client.patch(f'/api/v1/items/{item.pk}/', {'rack_no': 'R-2'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['rack_no'], 'R-2')

        response = self.client.delete(f'/api/v1/items/{item.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Item.objects.filter(pk=item.pk).exists())

    def test_item_not_found(self):
        response = self.client.get('/api/v1/items/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_code_preview(self):
        response = self.client.get(f'/api/v1/items/code-preview/?item_id=7&category={self.gifts.pk}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['item_code'], 'GI7')

        response = self.client.get('/api/v1/items/code-preview/?item_id=42')
        self.assertEqual(response.data['item_code'], 'ITEM-42')

        response = self.client.get(f'/api/v1/items/code-preview/?item_id=7&category={self.gifts.pk}&item_code=KEEP')
        self.assertEqual(response.data['item_code'], 'KEEP')

    def test_code_preview_validates_item_id(self):
        for query in ['', '?item_id=abc', '?item_id=-1', '?item_id=1.5']:
            with self.subTest(query=query):
                response = self.client.get(f'/api/v1/items/code-preview/{query}')
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_code_preview_unknown_category(self):
        response = self.client.get('/api/v1/items/code-preview/?item_id=1&category=999999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_generate_barcode_endpoint(self):
        response = self.client.post('/api/v1/items/generate-barcode/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['barcode']), 12)

    def test_create_item_rejects_generated_code_already_in_use(self):
        response = self.client.post('/api/v1/items/', {'name': 'First'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        first_id = response.data['id']

        # Hand-typed code equal to the one the next Grocery item will generate
        taken_code = f'GR{first_id + 1}'
        response = self.client.patch(f'/api/v1/items/{first_id}/', {'item_code': taken_code}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.post('/api/v1/items/', {'name': 'Second', 'category': self.grocery.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['item_code'], taken_code)
        self.assertIn('error', response.data)
        # The insert is rolled back
        self.assertFalse(Item.objects.filter(name='Second').exists())
        self.assertEqual(Item.objects.get(pk=first_id).item_code, taken_code)

    def test_create_item_with_code_after_conflict(self):
        holder = TestDataFactory.create_item(name='Holder', with_category=False)
        holder.item_code = f'GR{holder.pk + 1}'
        holder.save()

        data = {'name': 'Second', 'category': self.grocery.pk, 'item_code': 'GR-MANUAL'}
        response = self.client.post('/api/v1/items/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['item_code'], 'GR-MANUAL')


class ItemAdminTests(TestCase):
    """Test ItemAdmin code assignment"""

    def setUp(self):
        self.user = TestDataFactory.create_user(is_staff=True, is_superuser=True)
        self.request = RequestFactory().post('/admin/catalog/item/')
        self.request.user = self.user
        self.model_admin = ItemAdmin(Item, admin.site)
        self.category = TestDataFactory.create_category(name='Grocery')

    def test_save_model_assigns_code(self):
        item = Item(name='Rice', category=self.category)
        with patch.object(self.model_admin, 'message_user') as message_user:
            self.model_admin.save_model(self.request, item, form=None, change=False)
        item.refresh_from_db()
        self.assertEqual(item.item_code, f'GR{item.pk}')
        message_user.assert_not_called()

    def test_save_model_keeps_item_when_code_is_taken(self):
        item = TestDataFactory.create_item(name='Rice', category=self.category)
        TestDataFactory.create_item(item_code=f'GR{item.pk}')

        with patch.object(self.model_admin, 'message_user') as message_user:
            self.model_admin.save_model(self.request, item, form=None, change=True)

        item.refresh_from_db()
        self.assertIsNone(item.item_code)
        message_user.assert_called_once()
        self.assertEqual(message_user.call_args.kwargs['level'], messages.WARNING)

    def test_assign_action_assigns_and_skips_conflicts(self):
        assignable = TestDataFactory.create_item(name='Tea', category=self.category)
        blocked = TestDataFactory.create_item(name='Salt', category=self.category)
        TestDataFactory.create_item(name='Holder', item_code=f'GR{blocked.pk}')

        with patch.object(self.model_admin, 'message_user') as message_user:
            self.model_admin.assign_missing_item_codes(self.request, Item.objects.all())

        assignable.refresh_from_db()
        blocked.refresh_from_db()
        self.assertEqual(assignable.item_code, f'GR{assignable.pk}')
        self.assertIsNone(blocked.item_code)

        texts = [c.args[1] for c in message_user.call_args_list]
        self.assertEqual(texts[0], '1 item code(s) assigned.')
        self.assertIn(f'GR{blocked.pk}', texts[1])
        self.assertEqual(message_user.call_args_list[1].kwargs['level'], messages.WARNING)


class LabelGeneratorTests(TestCase):
    """Test barcode label layout and rendering"""

    def decode(self, data_url):
        self.assertTrue(data_url.startswith('data:image/png;base64,'))
        raw = base64.b64decode(data_url.split(',', 1)[1])
        return Image.open(io.BytesIO(raw))

    def test_truncate_name(self):
        self.assertEqual(truncate_name('Short'), 'Short')
        self.assertEqual(truncate_name('x' * 31), 'x' * 30 + '...')

    def test_generate_label_image(self):
        image = self.decode(generate_label_image('Basmati Rice 5kg', 'GR12', 'GR12', 'Rs.120.00'))
        self.assertEqual(image.size, (380, 190))
        self.assertEqual(image.format, 'PNG')

    def test_generate_label_image_survives_barcode_failure(self):
        with patch('backoffice.catalog.label_generator.render_barcode_image', side_effect=ValueError('bad')):
            image = self.decode(generate_label_image('Item', 'VALUE', 'GR1'))
        self.assertEqual(image.size, (380, 190))

    @override_settings(LABEL_CURRENCY_SYMBOL='Rs.')
    def test_build_label_sheet_expands_quantities(self):
        category = TestDataFactory.create_category(name='Grocery')
        rice = TestDataFactory.create_item(name='Rice', category=category, sell_price=Decimal('120'))
        tea = TestDataFactory.create_item(name='Tea', category=category, barcode='8901', sell_price=Decimal('55.5'))

        labels = build_label_sheet([(rice, 2), (tea, 0), (rice, 1)])

        self.assertEqual(len(labels), 4)
        self.assertEqual([label['key'] for label in labels],
                         [f'{rice.pk}-0', f'{rice.pk}-1', f'{tea.pk}-0', f'{rice.pk}-2'])
        self.assertEqual(labels[0]['item_code'], f'GR{rice.pk}')
        self.assertEqual(labels[0]['barcode_value'], f'GR{rice.pk}')
        self.assertEqual(labels[0]['price'], 'Rs.120.00')
        self.assertEqual(labels[2]['barcode_value'], '8901')
        self.assertEqual(labels[2]['price'], 'Rs.55.50')

    def test_build_label_sheet_without_price(self):
        item = TestDataFactory.create_item(with_category=False)
        item.sell_price = None
        labels = build_label_sheet([(item, 1)])
        self.assertEqual(labels[0]['price'], 'N/A')
        self.assertEqual(labels[0]['item_code'], f'ITEM-{item.pk}')


class LabelPrintAPITests(TestCase):
    """Test label printing endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.category = TestDataFactory.create_category(name='Gift Item')
        self.item = TestDataFactory.create_item(name='Teddy', category=self.category)

    def test_print_labels(self):
        data = {'items': [{'item_id': self.item.pk, 'quantity': 3}]}
        response = self.client.post('/api/v1/labels/print/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_labels'], 3)
        self.assertTrue(all(label['image'].startswith('data:image/png;base64,') for label in response.data['labels']))
        self.assertEqual(response.data['labels'][0]['item_code'], f'GI{self.item.pk}')

    def test_print_labels_without_rendering(self):
        data = {'items': [{'item_id': self.item.pk}], 'render': False}
        response = self.client.post('/api/v1/labels/print/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_labels'], 1)
        self.assertNotIn('image', response.data['labels'][0])

    def test_print_labels_unknown_item(self):
        data = {'items': [{'item_id': self.item.pk}, {'item_id': 999999}]}
        response = self.client.post('/api/v1/labels/print/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['missing_item_ids'], [999999])

    def test_print_labels_requires_items(self):
        response = self.client.post('/api/v1/labels/print/', {'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class BackfillItemCodesCommandTests(TestCase):
    """Test backfill_item_codes management command"""

    def setUp(self):
        self.category = TestDataFactory.create_category(name='Home Decor')
        self.missing = TestDataFactory.create_item(category=self.category)
        self.existing = TestDataFactory.create_item(category=self.category, item_code='HD-OLD')

    def test_dry_run_changes_nothing(self):
        out = io.StringIO()
        call_command('backfill_item_codes', '--dry-run', stdout=out)
        self.missing.refresh_from_db()
        self.assertIsNone(self.missing.item_code)
        self.assertIn('DRY RUN', out.getvalue())

    def test_backfill_assigns_missing_codes(self):
        out = io.StringIO()
        call_command('backfill_item_codes', stdout=out)
        self.missing.refresh_from_db()
        self.existing.refresh_from_db()
        self.assertEqual(self.missing.item_code, f'HD{self.missing.pk}')
        self.assertEqual(self.existing.item_code, 'HD-OLD')
        self.assertIn('1 items updated', out.getvalue())

    def test_backfill_skips_codes_already_in_use(self):
        # Another item already holds the code the missing one would get
        TestDataFactory.create_item(category=self.category, item_code=f'HD{self.missing.pk}')
        out = io.StringIO()
        call_command('backfill_item_codes', stdout=out)
        self.missing.refresh_from_db()
        self.assertIsNone(self.missing.item_code)
        self.assertIn('0 items updated, 1 skipped, 0 errors', out.getvalue())

    def test_backfill_counts_save_errors(self):
        out = io.StringIO()
        with patch.object(Item, 'save', side_effect=RuntimeError('disk full')):
            call_command('backfill_item_codes', stdout=out)
        self.assertIn('0 items updated, 0 skipped, 1 errors', out.getvalue())
        self.assertIn('disk full', out.getvalue())

    def test_dry_run_reports_counts(self):
        out = io.StringIO()
        call_command('backfill_item_codes', '--dry-run', stdout=out)
        self.assertIn('Would update 1 items, 0 skipped, 0 errors', out.getvalue())
