# backend/storage.py
"""
Object storage for product and profile images.

Files land under MEDIA_DIR (mounted at /static by the app) in paths namespaced
by entity and artisan id, e.g. ``products/<artisan_id>/<ms>-<hex>-<name>``.
"""
import logging
import re
import secrets
import time
from pathlib import Path
from typing import Iterable, List

from PIL import Image, ImageFilter, ImageOps

from . import config

log = logging.getLogger(__name__)

MAX_IMAGE_SIDE = 1200


class StorageError(Exception):
    pass


def media_root() -> Path:
    root = Path(config.MEDIA_DIR)
    root.mkdir(parents=True, exist_ok=True)
    return root


def public_url(key: str) -> str:
    """
    Build the public URL for a stored object.
    Absolute when BACKEND_ORIGIN is set (required in production), else /static/...
    """
    return f"{config.BACKEND_ORIGIN}/static/{key}" if config.BACKEND_ORIGIN else f"/static/{key}"


def _safe_name(filename: str) -> str:
    name = Path(filename or "image.jpg").name
    name = re.sub(r"[^A-Za-z0-9._-]", "_", name)
    return name or "image.jpg"


def enhance_image(path: Path) -> None:
    """Light enhancement pass; the original bytes stay if Pillow cannot read them."""
    try:
        img = Image.open(path)
        img = ImageOps.exif_transpose(img)
        img = ImageOps.autocontrast(img.convert("RGB"))
        img = img.filter(ImageFilter.UnsharpMask(radius=1, percent=150, threshold=3))
        img.thumbnail((MAX_IMAGE_SIDE, MAX_IMAGE_SIDE))
        fmt = "PNG" if path.suffix.lower() == ".png" else "JPEG"
        img.save(path, format=fmt, quality=90)
    except Exception as e:
        log.warning("Image enhancement skipped for %s: %s", path.name, e)


def upload_file(upload_file, folder: str, owner_id: str) -> str:
    """Save one UploadFile under <folder>/<owner_id>/ and return its public URL."""
    key = f"{folder}/{owner_id}/{int(time.time() * 1000)}-{secrets.token_hex(2)}-{_safe_name(getattr(upload_file, 'filename', ''))}"
    out_path = media_root() / key
    out_path.parent.mkdir(parents=True, exist_ok=True)

    content = upload_file.file.read()
    if not content:
        raise StorageError(f"Failed to upload image: {upload_file.filename}. Reason: empty file")
    with open(out_path, "wb") as f:
        f.write(content)

    enhance_image(out_path)
    log.info("Stored %s (%d bytes)", key, len(content))
    return public_url(key)


def upload_images(files: Iterable, artisan_id: str) -> List[str]:
    """Upload each file in turn; earlier uploads are kept if a later one fails."""
    return [upload_file(f, "products", artisan_id) for f in files]


def key_from_url(url: str) -> str:
    marker = "/static/"
    if not url or marker not in url:
        return ""
    prefix = f"{config.BACKEND_ORIGIN}/static/" if config.BACKEND_ORIGIN else "/static/"
    if not url.startswith(prefix):
        return ""
    return url[len(prefix):]


def delete_image(url: str) -> bool:
    """Remove a stored object. External or placeholder URLs are left alone."""
    key = key_from_url(url)
    if not key:
        return False
    path = media_root() / key
    if not path.resolve().is_relative_to(media_root().resolve()):
        return False
    if not path.is_file():
        return False
    path.unlink()
    log.info("Deleted image %s", key)
    return True
