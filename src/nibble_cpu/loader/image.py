"""Raw program image loader.

An image has no header, magic or length prefix: its bytes are the
initial memory contents starting at address 0.
"""

import logging
import os

from ..cpu.cpu import CPU, MEM_SIZE
from ..errors import LoadError

logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE = MEM_SIZE


def read_image(path: str | os.PathLike[str]) -> bytes:
    """Read a raw program image from disk.

    Args:
        path: Image file path.

    Returns:
        The image bytes.

    Raises:
        LoadError: If the file is larger than memory.
        OSError: If the file cannot be read.
    """
    with open(path, "rb") as f:
        data = f.read(MAX_IMAGE_SIZE + 1)
    if len(data) > MAX_IMAGE_SIZE:
        raise LoadError(f"{path}: image exceeds {MAX_IMAGE_SIZE} bytes")
    logger.info("read %d byte image from %s", len(data), path)
    return data


def load_image(path: str | os.PathLike[str], cpu: CPU) -> int:
    """Read an image file and load it into ``cpu`` at address 0.

    Returns:
        Number of bytes loaded.
    """
    data = read_image(path)
    cpu.load(data)
    return len(data)
