"""
Render settings

Everything about a run that is fixed for its duration: target size, output
path, the three vertex positions and the colors. The defaults reproduce the
reference image byte-for-byte.
"""

from dataclasses import dataclass
from pathlib import Path


DEFAULT_WIDTH = 640
DEFAULT_HEIGHT = 480
DEFAULT_OUTPUT = 'output.ppm'
DEFAULT_VERTICES = ((0.0, 0.5, 0.0, 1.0),
                    (-0.5, -0.5, 0.0, 1.0),
                    (0.5, -0.5, 0.0, 1.0))
DEFAULT_COLOR = (0.0, 1.0, 0.0, 1.0)
DEFAULT_CLEAR_COLOR = (0.0, 0.0, 0.0, 1.0)
VERTEX_COUNT = 3


def rgba(color):
    values = tuple(float(c) for c in color)
    if len(values) == 3:
        return values + (1.0,)
    if len(values) == 4:
        return values
    raise ValueError(f"Color must have 3 or 4 components, got {len(values)}")


@dataclass
class Settings:
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    output: Path = Path(DEFAULT_OUTPUT)
    vertices: tuple = DEFAULT_VERTICES
    color: tuple = DEFAULT_COLOR
    clear_color: tuple = DEFAULT_CLEAR_COLOR
    vertex_source: str = None
    fragment_source: str = None
    uniform_name: str = 'u_Vertices'

    def __post_init__(self):
        self.output = Path(self.output)

    @property
    def size(self):
        return self.width, self.height

    def validate(self):
        """
        Normalise the settings in place, raising `ValueError` for anything
        that cannot be rendered.
        """
        self.width = int(self.width)
        self.height = int(self.height)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Size must be positive, got {self.width}x{self.height}")
        vertices = tuple(tuple(float(v) for v in vertex) for vertex in self.vertices)
        if len(vertices) != VERTEX_COUNT or any(len(vertex) != 4 for vertex in vertices):
            raise ValueError(f"Exactly {VERTEX_COUNT} four-component vertices are required")
        self.vertices = vertices
        self.color = rgba(self.color)
        self.clear_color = rgba(self.clear_color)
        return self
