"""QR code rendering for short URLs

Functions:
    encode_as_image(text) -> str
        Render `text` as a PNG QR code and return it as a base64 data URL.

Example:
    >>> from clickshortener.utils.qr import encode_as_image
    >>> encode_as_image('https://sho.rt/abc123')[:22]
    'data:image/png;base64,'
"""

import base64
from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_M


DATA_URL_PREFIX = 'data:image/png;base64,'


def encode_as_image(text: str) -> str:
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=4,
        border=4,
    )
    qr.add_data(text)
    qr.make(fit=True)

    img = qr.make_image(fill_color='black', back_color='white')
    buffered = BytesIO()
    img.save(buffered, format='PNG')
    return DATA_URL_PREFIX + base64.b64encode(buffered.getvalue()).decode('ascii')
