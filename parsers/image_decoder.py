"""
Data URL image decoding for server favicons
"""

import base64
import binascii
import logging

from core.exceptions import InvalidEncodingError

logger = logging.getLogger(__name__)

def decode_data_url(data_url: str) -> bytes:
    """
    Decode a ``data:<mime>;base64,<payload>`` URL into raw image bytes.

    Raises InvalidEncodingError when the encoding tag is missing or is not
    base64, or when the payload cannot be decoded.
    """
    header, separator, payload = data_url.partition(',')
    if not separator:
        raise InvalidEncodingError("Data URL has no payload")

    _, _, media = header.partition(':')
    params = [part for part in media.split(';') if part]
    if len(params) < 2:
        raise InvalidEncodingError("Data URL has no encoding tag")

    encoding = params[-1]
    if encoding.lower() != 'base64':
        raise InvalidEncodingError(f"Data URL is not base64 encoded: {encoding}")

    try:
        # Servers commonly wrap the payload with newlines
        return base64.b64decode(''.join(payload.split()))
    except (binascii.Error, ValueError) as e:
        raise InvalidEncodingError(f"Invalid base64 payload: {e}")
