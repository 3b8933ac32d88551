"""
Utility functions for catalog operations
"""
import logging
import random
import re
from typing import Optional
from django.utils import timezone

logger = logging.getLogger(__name__)

# Word separators in category names: tab, LF, VT, FF, CR, space, NBSP, the
# Unicode space separators, LS, PS and BOM. Unlike str.split(), \x1c-\x1f and
# \x85 are not separators.
WHITESPACE_RUN = '[\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]+'
_WORD_SEPARATOR = re.compile(WHITESPACE_RUN)
_EDGE_WHITESPACE = re.compile(r'\A' + WHITESPACE_RUN + '|' + WHITESPACE_RUN + r'\Z')


class ItemCodeConflict(ValueError):
    """A generated item code is already stored on another item"""

    def __init__(self, item_code):
        self.item_code = item_code
        super().__init__(f"Item code {item_code} is already used by another item")


def split_category_words(category_name: str) -> list:
    """Trim, then split on whitespace runs. A blank name gives ['']"""
    return _WORD_SEPARATOR.split(_EDGE_WHITESPACE.sub('', category_name))


def generate_item_code(category_name: Optional[str], item_id: int, existing_item_code: Optional[str] = None) -> str:
    """
    Derive the short display code for an item from its category name and id.

    Examples:
        ("Gift Item", 7)     -> "GI7"
        ("Grocery", 100)     -> "GR100"
        ("A", 3)             -> "AX3"
        (None, 42) / ("", 42) -> "ITEM-42"
        ("   ", 5)           -> "XX5"

    A non-empty existing code always wins and is returned unchanged. Characters
    are taken per code point, so "Épicerie" -> "ÉP". Never raises.
    """
    if existing_item_code:
        return existing_item_code

    if not category_name:
        return f"ITEM-{item_id}"

    # A whitespace-only name keeps one empty word so it lands on "XX", not "ITEM-"
    words = split_category_words(category_name)

    if len(words) > 1:
        # "Gift Item" -> "GI"
        prefix = (words[0][:1] + words[1][:1]).upper()
    elif len(words[0]) > 1:
        # "Grocery" -> "GR"
        prefix = words[0][:2].upper()
    elif len(words[0]) == 1:
        prefix = words[0].upper() + 'X'
    else:
        prefix = 'XX'

    return f"{prefix}{item_id}"


def get_display_item_code(item) -> str:
    """Code shown for an item: the stored one, else generated from its category"""
    category_name = item.category.name if item.category_id and item.category else None
    return generate_item_code(category_name, item.pk, item.item_code)


def item_code_taken(item_code, exclude_pk=None) -> bool:
    """Whether another item already stores this code"""
    from backoffice.catalog.models import Item

    queryset = Item.objects.filter(item_code=item_code)
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    return queryset.exists()


def assign_item_code(item, save=True) -> str:
    """
    Persist a generated item code on an item that doesn't have one yet.

    The item must already be saved (the code embeds its primary key).
    Items that already carry a code keep it. Raises ItemCodeConflict, leaving
    the item unchanged, when another item already stores the generated code.
    """
    if item.pk is None:
        raise ValueError("Item must be saved before an item code can be assigned")

    if item.item_code:
        return item.item_code

    item_code = get_display_item_code(item)
    if item_code_taken(item_code, exclude_pk=item.pk):
        logger.warning(f"Item code {item_code} for item {item.pk} is already used by another item")
        raise ItemCodeConflict(item_code)

    item.item_code = item_code
    if save:
        item.save(update_fields=['item_code', 'updated_at'])
    logger.info(f"Assigned item code {item.item_code} to item {item.pk}")
    return item.item_code


def generate_unique_barcode(max_attempts=100) -> str:
    """Generate a unique 12-digit numeric barcode (YYMMDD + 6 random digits)"""
    from backoffice.catalog.models import Item

    date_part = timezone.now().strftime('%y%m%d')
    for _ in range(max_attempts):
        barcode = f"{date_part}{random.randint(0, 999999):06d}"
        if not Item.objects.filter(barcode=barcode).exists():
            return barcode

    logger.error(f"Could not generate a unique barcode after {max_attempts} attempts")
    raise RuntimeError('Could not generate a unique barcode')
