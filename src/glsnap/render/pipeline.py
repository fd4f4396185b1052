"""
Render a triangle into an off-screen target and save it as a pixel map

Resources are acquired in dependency order (context, render target, program,
vertex array) and released in reverse on every exit path.
"""

from contextlib import ExitStack
import struct

from loguru import logger
import moderngl

from ..clock import system_clock, elapsed_ms
from ..ppm import write_image
from .context import RenderingContext
from .shaders import build_program, shader_sources


def upload_vertices(program, vertices, name='u_Vertices'):
    uniform = program.get(name, None)
    if not isinstance(uniform, moderngl.Uniform):
        logger.warning("Could not find {} uniform location", name)
        return False
    try:
        uniform.value = [tuple(vertex) for vertex in vertices]
    except (moderngl.Error, struct.error, TypeError, ValueError) as exc:
        logger.warning("Unable to set {} uniform: {}", name, str(exc).strip())
        return False
    return True


def draw_triangle(context, target, program, vertices, clear_color=(0, 0, 0, 1), uniform_name='u_Vertices'):
    """
    Upload `vertices` to `program`, clear `target` and draw a single triangle
    into it. Returns the vertex array used for the draw, or `None` if there was
    no program to draw with, in which case the target is only cleared.
    """
    if program is not None:
        upload_vertices(program, vertices, uniform_name)
    target.use()
    target.framebuffer.viewport = (0, 0, target.width, target.height)
    target.clear(clear_color)
    if program is None:
        logger.error("No usable shader program, triangle not drawn")
        return None
    vertex_array = context.vertex_array(program)
    vertex_array.render(mode=moderngl.TRIANGLES, vertices=len(vertices), first=0)
    return vertex_array


def render(settings):
    """
    Run the whole pipeline for `settings`. Returns whether the output image was
    written; raises `RenderError` for failures that prevent rendering at all.
    """
    start = system_clock()
    with ExitStack() as stack:
        context = RenderingContext.acquire(settings.width, settings.height)
        stack.callback(context.release)
        target = context.render_target()
        stack.callback(target.release)
        target.use()
        vertex_source, fragment_source = shader_sources(context, settings)
        program = build_program(context, vertex_source, fragment_source)
        if program is not None:
            stack.callback(program.release)
        vertex_array = draw_triangle(context, target, program, settings.vertices, settings.clear_color, settings.uniform_name)
        if vertex_array is not None:
            stack.callback(vertex_array.release)
        pixels = target.read()
        logger.debug("Rendered {} in {:.1f}ms", target, elapsed_ms(start))
        saved = write_image(settings.output, settings.width, settings.height, pixels)
    return saved
