"""
Shader program building

Compile and link failures are reported and never raised: the pipeline carries
on without a program and the target is left holding its clear color.
"""

from loguru import logger
import mako.exceptions
from mako.template import Template

from ..clock import system_clock, elapsed_ms
from .glsl import TemplateLoader


DEFAULT_VERTEX_SOURCE = TemplateLoader.get_template('triangle.vert')
DEFAULT_FRAGMENT_SOURCE = TemplateLoader.get_template('triangle.frag')
MAX_LOG_LENGTH = 511
SHADER_STAGES = {'vertex_shader': "Vertex shader compile", 'fragment_shader': "Fragment shader compile"}
LOG_HEADINGS = set(SHADER_STAGES) | {"Program"}


def render_source(source, default, **names):
    if source is None:
        return default.render(**names).strip()
    try:
        return Template(source, lookup=TemplateLoader).render(**names).strip()
    except (mako.exceptions.MakoException, NameError) as exc:
        logger.error("Shader template error, using source as given: {}", str(exc).strip())
        return source.replace("${HEADER}", names["HEADER"]).strip()


def shader_sources(context, settings):
    names = {'HEADER': context.header, 'uniform_name': settings.uniform_name,
             'vertex_count': len(settings.vertices), 'color': settings.color}
    return (render_source(settings.vertex_source, DEFAULT_VERTEX_SOURCE, **names),
            render_source(settings.fragment_source, DEFAULT_FRAGMENT_SOURCE, **names))


def parse_error(text):
    """
    Split a compile/link exception message into the failing step and the
    driver's diagnostic log, truncated to `MAX_LOG_LENGTH` characters.
    """
    lines = text.strip().split('\n')
    if 'Linker' in lines[0]:
        step = "Program link"
    else:
        step = next((SHADER_STAGES[line.strip()] for line in lines if line.strip() in SHADER_STAGES), "Shader compile")
    log = '\n'.join(line for line in lines[1:]
                    if line.strip() not in LOG_HEADINGS and set(line.strip()) != {'='}).strip()
    return step, log[:MAX_LOG_LENGTH]


def numbered(source):
    return '\n'.join(f'{i+1:3d}|{line}' for i, line in enumerate(source.split('\n')))


def build_program(context, vertex_source, fragment_source):
    """
    Compile and link a program from the two stage sources. Returns `None` if
    either stage fails to compile or the link fails, after logging the
    driver's diagnostics.
    """
    start = system_clock()
    try:
        program = context.program(vertex_shader=vertex_source, fragment_shader=fragment_source)
    except Exception as exc:
        step, log = parse_error(str(exc))
        logger.error("{} error: {}", step, log)
        source = fragment_source if step.startswith('Fragment') else vertex_source
        logger.trace("Failing source:\n{}", numbered(source))
        return None
    logger.debug("GL program compiled in {:.1f}ms", elapsed_ms(start))
    return program
