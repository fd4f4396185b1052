"""
Common glsnap initialisation

All diagnostics go through loguru. PyOpenGL reports through the standard
library `logging` module, so its records are forwarded into loguru too.
"""

import logging
import sys

from loguru import logger


__version__ = "1.0.0"

LOGGING_LEVEL = "SUCCESS"
NAME_WIDTH = 22
LOGGING_FORMAT = "{time:HH:mm:ss.SSS} {extra[shortname]:%d} | <level>{level}: {message}</level>" % NAME_WIDTH


def shorten_name(name, width=NAME_WIDTH):
    """Abbreviate the leading parts of a dotted module name until it fits `width`"""
    parts = name.split('.')
    for i in range(len(parts)-1):
        if len('.'.join(parts)) <= width:
            break
        parts[i] = parts[i][0]
    return '.'.join(parts)


class LoguruInterceptHandler(logging.Handler):
    """
    Forward standard library records to loguru under the name of the
    originating logger (`OpenGL.platform.ctypesloader` etc.)
    """
    @classmethod
    def install(cls, level=0):
        handler = cls()
        logging.basicConfig(handlers=[handler], level=level, force=True)
        return handler

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        frame, depth = logging.currentframe().f_back, 1
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        named = logger.patch(lambda loguru_record, name=record.name: (loguru_record.update(name=name),
                                                                     loguru_record['extra'].update(shortname=shorten_name(name))))
        named.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logger(level=None):
    global LOGGING_LEVEL
    if level is not None:
        LOGGING_LEVEL = level
    logger.configure(handlers=[dict(sink=sys.stderr, format=LOGGING_FORMAT, level=LOGGING_LEVEL)],
                     patcher=lambda record: record['extra'].update(shortname=shorten_name(record['name'])))
    LoguruInterceptHandler.install(logger.level(LOGGING_LEVEL).no)
    return logger
