import unittest

from loguru import logger


class LogCapture:
    """
    Collect loguru records emitted while the context is active
    """
    def __init__(self, level='TRACE'):
        self.level = level
        self.records = []
        self._handler_id = None

    def _sink(self, message):
        self.records.append(message.record)

    def __enter__(self):
        self.records = []
        self._handler_id = logger.add(self._sink, level=self.level, format="{message}")
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        logger.remove(self._handler_id)
        self._handler_id = None

    def messages(self, level=None):
        return [record['message'] for record in self.records if level is None or record['level'].name == level]


def acquire_context(width, height):
    """Acquire a headless rendering context or skip the calling test"""
    try:
        from glsnap.render import RenderError
        from glsnap.render.context import RenderingContext
    except (ImportError, OSError) as exc:
        raise unittest.SkipTest(f"OpenGL/EGL libraries unavailable: {exc}")
    try:
        return RenderingContext.acquire(width, height)
    except RenderError as exc:
        raise unittest.SkipTest(f"No headless OpenGL context: {exc}")


class TestCase(unittest.TestCase):
    def assertLogged(self, capture, level, text, msg=None):
        messages = capture.messages(level)
        if not any(text in message for message in messages):
            self.fail(msg or f"No {level} message containing {text!r} in {messages!r}")
