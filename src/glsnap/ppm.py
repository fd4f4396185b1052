"""
P6 portable pixel map output

Pixel buffers come back from the GPU with the bottom row first; a pixel map
stores the top row first, so rows are reversed on the way out (and on the way
back in).
"""

from pathlib import Path

from loguru import logger
import PIL.Image


CHANNELS = 3


def write_image(path, width, height, pixels):
    """
    Write an RGB8 bottom-up pixel buffer to `path` as a P6 pixel map.

    The header is exactly `P6\\n<width> <height>\\n255\\n` followed by the rows
    from the last to the first, each `width * 3` bytes. Returns `True` if the
    file was written; a file that cannot be opened or written is logged and
    `False` returned.
    """
    path = Path(path)
    if len(pixels) != width * height * CHANNELS:
        raise ValueError(f"Expected {width * height * CHANNELS} bytes of pixel data for {width}x{height}, got {len(pixels)}")
    image = PIL.Image.frombytes('RGB', (width, height), bytes(pixels)).transpose(PIL.Image.Transpose.FLIP_TOP_BOTTOM)
    try:
        image.save(path, 'PPM')
    except OSError as exc:
        logger.error("Failed to open file for writing: {} ({})", path, exc.strerror or exc)
        return False
    logger.success("Saved image to {}", path)
    return True


def read_image(path):
    """
    Read a P6 pixel map back into `(width, height, pixels)` with `pixels` in
    bottom-up row order, i.e. as it would have been read back from the GPU.
    """
    with PIL.Image.open(path) as image:
        if image.format != 'PPM' or image.mode != 'RGB':
            raise ValueError(f"Not an RGB pixel map: {path}")
        width, height = image.size
        pixels = image.transpose(PIL.Image.Transpose.FLIP_TOP_BOTTOM).tobytes()
    return width, height, pixels
