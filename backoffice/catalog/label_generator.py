"""
Local barcode label generator for item stickers
Uses PIL/Pillow and python-barcode; layout is item name on top, Code128 barcode
in the middle and "<item code> | <price>" underneath.
"""
import io
import base64
import logging
from typing import Optional
from PIL import Image, ImageDraw, ImageFont
import barcode
from barcode.writer import ImageWriter
from django.conf import settings
from backoffice.core.formatting import format_currency

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 30


def truncate_name(name: str, max_length: int = MAX_NAME_LENGTH) -> str:
    if len(name) > max_length:
        return name[:max_length] + '...'
    return name


def _load_fonts():
    """Return (medium, small) fonts, falling back to Pillow's default font"""
    try:
        return (
            ImageFont.truetype('/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf', 14),
            ImageFont.truetype('/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf', 12),
        )
    except (OSError, IOError):
        try:
            return ImageFont.truetype('arial.ttf', 14), ImageFont.truetype('arial.ttf', 12)
        except (OSError, IOError):
            return ImageFont.load_default(), ImageFont.load_default()


def _draw_centered(draw, y, text, font, width):
    bbox = draw.textbbox((0, 0), text, font=font)
    text_width = bbox[2] - bbox[0]
    draw.text(((width - text_width) // 2, y), text, fill='black', font=font)


def render_barcode_image(barcode_value: str):
    """Render a Code128 barcode (bars only, no text) as a PIL image"""
    code128 = barcode.get_barcode_class('code128')
    barcode_instance = code128(barcode_value, writer=ImageWriter())
    return barcode_instance.render({
        'write_text': False,
        'module_width': 0.3,
        'module_height': 15.0,
        'quiet_zone': 2.0,
        'font_size': 0,
        'text_distance': 0,
        'background': 'white',
        'foreground': 'black',
    })


def generate_label_image(
    item_name: str,
    barcode_value: str,
    item_code: str,
    price_text: Optional[str] = None,
    width: int = 380,  # 38mm at 10 px/mm
    height: int = 190,  # 19mm at 10 px/mm
) -> str:
    """
    Generate a barcode sticker image.

    Args:
        item_name: Item name (truncated to 30 characters)
        barcode_value: Value encoded in the barcode
        item_code: Display code printed under the barcode
        price_text: Formatted sell price (e.g. "Rs.120.00"); "N/A" when omitted
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        Base64-encoded PNG image as data URL string
    """
    item_name = truncate_name(item_name or '')
    price_text = price_text or 'N/A'

    img = Image.new('RGB', (width, height), color='white')
    draw = ImageDraw.Draw(img)
    font_medium, font_small = _load_fonts()

    margin = 8
    name_y = 6
    barcode_y = name_y + 22
    bottom_text = f"{item_code} | {price_text}"
    bottom_y = height - 22

    _draw_centered(draw, name_y, item_name, font_medium, width)

    try:
        barcode_img = render_barcode_image(barcode_value)
        barcode_img_width, barcode_img_height = barcode_img.size

        # Fit within the margins and the space left between the two text lines
        available_width = width - (2 * margin)
        available_height = bottom_y - barcode_y - 4
        scale_factor = min(available_width / barcode_img_width, available_height / barcode_img_height)
        scaled_size = (max(1, int(barcode_img_width * scale_factor)), max(1, int(barcode_img_height * scale_factor)))

        barcode_img = barcode_img.resize(scaled_size, Image.Resampling.BILINEAR)
        img.paste(barcode_img, ((width - scaled_size[0]) // 2, barcode_y))
    except Exception as e:
        logger.error(f"Barcode generation failed for '{barcode_value}': {str(e)}", exc_info=True)
        _draw_centered(draw, barcode_y + 20, f'BARCODE: {barcode_value}', font_small, width)

    _draw_centered(draw, bottom_y, bottom_text, font_small, width)

    buffer = io.BytesIO()
    img.save(buffer, format='PNG', optimize=False, compress_level=1)
    image_base64 = base64.b64encode(buffer.getvalue()).decode('utf-8')
    buffer.close()
    img.close()

    return f'data:image/png;base64,{image_base64}'


def build_label_sheet(selections):
    """
    Expand (item, quantity_to_print) pairs into one entry per printed sticker.

    Quantities below 1 are printed once. Each label gets a key
    "<item id>-<n>" that is unique within the sheet.
    """
    label_currency = getattr(settings, 'LABEL_CURRENCY_SYMBOL', None)
    labels = []
    printed_per_item = {}
    for item, quantity in selections:
        try:
            quantity = max(1, int(quantity))
        except (TypeError, ValueError):
            quantity = 1

        item_code = item.display_code
        label = {
            'item_id': item.pk,
            'item_name': item.name,
            'item_code': item_code,
            'barcode_value': item.label_barcode_value,
            'price': format_currency(item.sell_price, symbol=label_currency),
        }
        # Keys keep counting when the same item is selected more than once
        start = printed_per_item.get(item.pk, 0)
        for n in range(start, start + quantity):
            labels.append({**label, 'key': f'{item.pk}-{n}'})
        printed_per_item[item.pk] = start + quantity
    return labels


def render_label_sheet(labels):
    """Attach a rendered image to each label, rendering each distinct item once"""
    rendered = {}
    for label in labels:
        item_id = label['item_id']
        if item_id not in rendered:
            rendered[item_id] = generate_label_image(
                item_name=label['item_name'],
                barcode_value=label['barcode_value'],
                item_code=label['item_code'],
                price_text=label['price'],
            )
        label['image'] = rendered[item_id]
    return labels
