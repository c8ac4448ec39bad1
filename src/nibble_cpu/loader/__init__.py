"""Program image loader module."""

from .image import MAX_IMAGE_SIZE, load_image, read_image

__all__ = ["MAX_IMAGE_SIZE", "load_image", "read_image"]
