"""Storage for uploaded files."""

from .images import get_images_dir, remove_image, store_image_and_get_url

__all__ = ["get_images_dir", "remove_image", "store_image_and_get_url"]
