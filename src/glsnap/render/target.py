"""
Off-screen render target
"""

from loguru import logger
import moderngl
import numpy as np

from . import RenderError


COMPONENTS = 3


class RenderTarget:
    """
    A framebuffer with a single RGB8 texture as color attachment 0

    Once `use()` has been called all draws and reads go to this target rather
    than the context's pbuffer surface.
    """
    def __init__(self, context, width, height):
        self.width = width
        self.height = height
        self._texture = context.texture((self.width, self.height), COMPONENTS, dtype='f1')
        self._texture.filter = moderngl.LINEAR, moderngl.LINEAR
        self._framebuffer = None
        try:
            self._framebuffer = context.framebuffer(color_attachments=(self._texture,))
        except moderngl.Error as exc:
            self._texture.release()
            self._texture = None
            raise RenderError("Check framebuffer", str(exc).strip()) from exc
        logger.debug("Created {}", str(self))

    def release(self):
        if self._framebuffer is not None:
            self._framebuffer.release()
            self._framebuffer = None
        if self._texture is not None:
            self._texture.release()
            self._texture = None
            logger.debug("Destroyed {}", str(self))

    def __str__(self):
        return f"{self.width}x{self.height} RGB8 render target"

    @property
    def size(self):
        return self.width, self.height

    @property
    def texture(self):
        return self._texture

    @property
    def framebuffer(self):
        return self._framebuffer

    def use(self):
        self._framebuffer.use()

    def clear(self, color=(0, 0, 0, 1)):
        self._framebuffer.clear(*tuple(color))

    def read(self):
        """
        Read back the color attachment as tightly packed RGB8 rows, bottom row
        first. Blocks until every draw into the target has completed.
        """
        return self._framebuffer.read(viewport=(0, 0, self.width, self.height), components=COMPONENTS,
                                      attachment=0, alignment=1, dtype='f1')

    @property
    def array(self):
        return np.ndarray((self.height, self.width, COMPONENTS), np.uint8, self.read())

    def __enter__(self):
        self.use()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.release()
