"""
glsnap off-screen rendering
"""

import os


# PyOpenGL picks its platform on first import; rendering here is always headless
os.environ.setdefault('PYOPENGL_PLATFORM', 'egl')


class RenderError(RuntimeError):
    """
    A fatal failure setting up the rendering pipeline; `step` names the
    operation that failed.
    """
    def __init__(self, step, message):
        super().__init__(f"{step} failed: {message}")
        self.step = step
        self.message = message
