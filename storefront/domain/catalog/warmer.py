# storefront/domain/catalog/warmer.py
import asyncio
import logging
from typing import Iterable, List

import httpx

from .schemas import ImageWarmupResult, Product

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; storefront-image-warmer)"


def collect_image_urls(products: Iterable[Product]) -> List[str]:
    """Absolute image URLs of products and their variants, de-duplicated."""
    urls = []
    for product in products:
        urls.extend(product.images)
        for variant in product.variants:
            urls.extend(variant.images)
    return [url for url in dict.fromkeys(urls) if url.startswith("http")]


class ImageWarmer:
    """Primes upstream image caches with HEAD requests, a few at a time."""

    def __init__(self, batch_size: int = 5, pause: float = 0.2, timeout: float = 10.0, transport=None):
        self.batch_size = max(1, batch_size)
        self.pause = pause
        self.timeout = timeout
        self._transport = transport

    async def _head(self, client: httpx.AsyncClient, url: str, result: ImageWarmupResult) -> None:
        try:
            response = await client.head(url)
        except httpx.HTTPError as exc:
            result.failed += 1
            result.errors.append(f"{url}: {exc}")
            logger.warning("Image warm-up error for %s: %s", url, exc)
            return

        if response.is_success:
            result.success += 1
        else:
            result.failed += 1
            result.errors.append(f"{url}: {response.status_code} {response.reason_phrase}")
            logger.warning("Image warm-up failed for %s (%s)", url, response.status_code)

    async def warm(self, urls: List[str]) -> ImageWarmupResult:
        result = ImageWarmupResult()
        logger.info("Warming %d image URLs", len(urls))

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
            transport=self._transport,
        ) as client:
            for start in range(0, len(urls), self.batch_size):
                batch = urls[start:start + self.batch_size]
                await asyncio.gather(*(self._head(client, url, result) for url in batch))
                if start + self.batch_size < len(urls) and self.pause > 0:
                    await asyncio.sleep(self.pause)

        logger.info("Image warm-up finished: %d ok, %d failed", result.success, result.failed)
        return result
