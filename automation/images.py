"""
Product image download for the product detail record.
"""

from __future__ import annotations

import asyncio
import base64
from typing import Optional

import requests

from automation.constants import USER_AGENT
from shared.logging import get_logger

logger = get_logger(__name__)

IMAGE_DOWNLOAD_TIMEOUT_SECONDS = 10


def fetch_image_base64(url: str, timeout: float = IMAGE_DOWNLOAD_TIMEOUT_SECONDS) -> Optional[str]:
    """
    Download an image and return it base64-encoded.

    Returns None on any HTTP or network failure; the record is still usable
    without the image.
    """
    try:
        response = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning("product_image_download_failed", url=url, error=str(e))
        return None
    return base64.b64encode(response.content).decode("ascii")


async def fetch_image_base64_async(url: str) -> Optional[str]:
    return await asyncio.to_thread(fetch_image_base64, url)
