"""
Headless EGL rendering context

The EGL display, config, context and pbuffer surface are owned by a single
`RenderingContext`, which wraps the current context in a `moderngl.Context`.
All GL objects are created through it and it is the only thing that is ever
made current, so there is no ambient GL state anywhere else in the package.
"""

import ctypes
import os

from loguru import logger
import moderngl
import numpy as np
from OpenGL import EGL
import OpenGL.error

from . import RenderError
from .target import RenderTarget


GLSL_HEADER = "#version 330\n"
REQUIRED_GL_VERSION = 330

CONFIG_ATTRIBUTES = (EGL.EGL_SURFACE_TYPE, EGL.EGL_PBUFFER_BIT,
                     EGL.EGL_BLUE_SIZE, 8,
                     EGL.EGL_GREEN_SIZE, 8,
                     EGL.EGL_RED_SIZE, 8,
                     EGL.EGL_DEPTH_SIZE, 8,
                     EGL.EGL_RENDERABLE_TYPE, EGL.EGL_OPENGL_BIT,
                     EGL.EGL_NONE)

GLFUNCTYPE = ctypes.CFUNCTYPE


class EGLLoader:
    FUNCTIONS = {}

    @staticmethod
    def load_opengl_function(name):
        address = ctypes.cast(EGL.eglGetProcAddress(name.encode('ascii')), ctypes.c_void_p).value
        if address:
            return address
        if (function := EGLLoader.FUNCTIONS.get(name)) is not None:
            return ctypes.cast(function, ctypes.c_void_p).value
        logger.trace("Request for missing GL function: {}", name)

        def missing(name):
            def function():
                logger.error("Call to missing GL function: {}", name)
                os._exit(1)
            return function

        function = GLFUNCTYPE(None)(missing(name))
        EGLLoader.FUNCTIONS[name] = function
        return ctypes.cast(function, ctypes.c_void_p).value

    @staticmethod
    def release():
        pass


def egl_call(step, function, *args):
    try:
        result = function(*args)
    except OpenGL.error.Error as exc:
        raise RenderError(step, str(exc).strip()) from exc
    if not result:
        raise RenderError(step, f"EGL error 0x{EGL.eglGetError():04X}")
    return result


class RenderingContext:
    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.glctx = None
        self.header = GLSL_HEADER
        self._display = None
        self._initialized = False
        self._config = None
        self._context = None
        self._surface = None
        self._current = False

    @classmethod
    def acquire(cls, width, height):
        """
        Create a headless context with a `width` x `height` pbuffer surface and
        make it current on the calling thread. Anything acquired before a
        failing step is released again before the `RenderError` propagates.
        """
        context = cls(width, height)
        try:
            context._acquire()
        except BaseException:
            context.release()
            raise
        return context

    def _acquire(self):
        self._display = egl_call("Get EGL display", EGL.eglGetDisplay, EGL.EGL_DEFAULT_DISPLAY)
        major, minor = EGL.EGLint(), EGL.EGLint()
        egl_call("Initialize EGL", EGL.eglInitialize, self._display, major, minor)
        self._initialized = True
        logger.debug("EGL version: {}.{}", major.value, minor.value)

        config_attributes = np.array(CONFIG_ATTRIBUTES, dtype=np.int32)
        configs = (EGL.EGLConfig * 1)()
        count = EGL.EGLint()
        egl_call("Choose EGL config", EGL.eglChooseConfig, self._display, config_attributes, configs, 1, count)
        if count.value < 1:
            raise RenderError("Choose EGL config", "no matching configuration")
        self._config = configs[0]

        egl_call("Bind OpenGL API", EGL.eglBindAPI, EGL.EGL_OPENGL_API)
        self._context = egl_call("Create EGL context", EGL.eglCreateContext, self._display, self._config, EGL.EGL_NO_CONTEXT, None)

        surface_attributes = np.array([EGL.EGL_WIDTH, self.width, EGL.EGL_HEIGHT, self.height, EGL.EGL_NONE], dtype=np.int32)
        self._surface = egl_call("Create EGL surface", EGL.eglCreatePbufferSurface, self._display, self._config, surface_attributes)

        egl_call("Make context current", EGL.eglMakeCurrent, self._display, self._surface, self._surface, self._context)
        self._current = True

        try:
            self.glctx = moderngl.create_context(require=REQUIRED_GL_VERSION, context=EGLLoader)
        except moderngl.Error as exc:
            raise RenderError("Create OpenGL context", str(exc).strip()) from exc
        logger.debug("OpenGL info: {GL_RENDERER} {GL_VERSION}", **self.glctx.info)
        logger.trace("{!r}", self.glctx.info)

    def _teardown(self, step, function, *args):
        try:
            function(*args)
        except OpenGL.error.Error as exc:
            logger.warning("{} failed during teardown: {}", step, str(exc).strip())

    def release(self):
        if self.glctx is not None:
            self.glctx.release()
            self.glctx = None
        if self._current:
            self._teardown("Release current context", EGL.eglMakeCurrent, self._display,
                           EGL.EGL_NO_SURFACE, EGL.EGL_NO_SURFACE, EGL.EGL_NO_CONTEXT)
            self._current = False
        if self._surface is not None:
            self._teardown("Destroy EGL surface", EGL.eglDestroySurface, self._display, self._surface)
            self._surface = None
        if self._context is not None:
            self._teardown("Destroy EGL context", EGL.eglDestroyContext, self._display, self._context)
            self._context = None
        if self._initialized:
            self._teardown("Terminate EGL display", EGL.eglTerminate, self._display)
            self._initialized = False
        if self._display is not None:
            logger.debug("Released {}x{} rendering context", self.width, self.height)
        self._display = None
        self._config = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.release()

    def render_target(self, width=None, height=None):
        return RenderTarget(self, self.width if width is None else width, self.height if height is None else height)

    def texture(self, size, components, **kwargs):
        return self.glctx.texture(size, components, **kwargs)

    def framebuffer(self, color_attachments=(), depth_attachment=None):
        return self.glctx.framebuffer(color_attachments=color_attachments, depth_attachment=depth_attachment)

    def program(self, vertex_shader, fragment_shader):
        return self.glctx.program(vertex_shader=vertex_shader, fragment_shader=fragment_shader)

    def vertex_array(self, program, content=()):
        return self.glctx.vertex_array(program, list(content))
