# storefront/domain/catalog/images.py
import logging
import re
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

MAX_IMAGES = 4

DRIVE_DIRECT_VIEW = "https://drive.google.com/uc?export=view&id={file_id}"

_DRIVE_SHARE_RE = re.compile(r"drive\.google\.com/file/d/([a-zA-Z0-9_-]+)")
_BARE_FILE_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{28,}$")

# Hosts whose URLs are served directly, even when pasted without a scheme.
KNOWN_IMAGE_HOSTS = (
    "cloudinary.com",
    "amazonaws.com",
    "s3.",
    "firebasestorage.googleapis.com",
    "ik.imagekit.io",
)


def normalize_image_url(url: Optional[str]) -> Optional[str]:
    """Return the canonical fetchable form of an image reference, or None to drop it."""
    if not url or not url.strip():
        return None
    url = url.strip()

    if url.startswith("http") and "drive.google.com/file/d/" not in url:
        return url

    if url.startswith("/"):
        return url

    match = _DRIVE_SHARE_RE.search(url)
    if match:
        return DRIVE_DIRECT_VIEW.format(file_id=match.group(1))

    if "drive.google.com/uc?" in url:
        return url

    if _BARE_FILE_ID_RE.match(url):
        return DRIVE_DIRECT_VIEW.format(file_id=url)

    if any(host in url for host in KNOWN_IMAGE_HOSTS):
        return url

    logger.warning("Unable to process image URL: %s", url)
    return None


def normalize_images(urls: Iterable[Optional[str]]) -> List[str]:
    """First ``MAX_IMAGES`` recognised URLs, in slot order."""
    images = []
    for url in urls:
        canonical = normalize_image_url(url)
        if canonical is not None:
            images.append(canonical)
        if len(images) == MAX_IMAGES:
            break
    return images
