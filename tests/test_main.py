"""
Tests of the command line entry point
"""

from pathlib import Path
import tempfile
import unittest
import unittest.mock

from glsnap.__main__ import FATAL_EXIT_STATUS, build_parser, main, make_settings
from glsnap.render import RenderError
from glsnap.settings import DEFAULT_VERTICES


class TestArguments(unittest.TestCase):
    def settings(self, *argv):
        parser = build_parser()
        return make_settings(parser, parser.parse_args(argv))

    def test_defaults(self):
        settings = self.settings()
        self.assertEqual(settings.size, (640, 480))
        self.assertEqual(settings.output, Path('output.ppm'))
        self.assertEqual(settings.vertices, DEFAULT_VERTICES)
        self.assertEqual(settings.color, (0.0, 1.0, 0.0, 1.0))

    def test_options(self):
        settings = self.settings('--size', '320', '200', '-o', 'tri.ppm', '--color', '1', '0', '0', '--clear', '0', '0', '1', '0.5',
                                 '--vertex', '0', '1', '0', '1', '--vertex', '-1', '-1', '0', '1', '--vertex', '1', '-1', '0', '1',
                                 '--uniform', 'positions')
        self.assertEqual(settings.size, (320, 200))
        self.assertEqual(settings.output, Path('tri.ppm'))
        self.assertEqual(settings.color, (1.0, 0.0, 0.0, 1.0))
        self.assertEqual(settings.clear_color, (0.0, 0.0, 1.0, 0.5))
        self.assertEqual(settings.vertices, ((0.0, 1.0, 0.0, 1.0), (-1.0, -1.0, 0.0, 1.0), (1.0, -1.0, 0.0, 1.0)))
        self.assertEqual(settings.uniform_name, 'positions')

    def test_shader_files(self):
        with tempfile.TemporaryDirectory() as directory:
            path = Path(directory) / 'shader.frag'
            path.write_text("${HEADER}\nout vec4 c;\nvoid main() { c = vec4(1.0); }\n", encoding='utf8')
            settings = self.settings('--fragment-shader', str(path))
        self.assertTrue(settings.fragment_source.startswith("${HEADER}"))
        self.assertIsNone(settings.vertex_source)

    def test_invalid(self):
        for argv in [('--size', '0', '10'), ('--vertex', '0', '0', '0', '1'), ('--color', '1', '0'),
                     ('--vertex-shader', '/nonexistent/shader.vert')]:
            with self.subTest(argv=argv):
                with unittest.mock.patch('sys.stderr'):
                    with self.assertRaises(SystemExit):
                        self.settings(*argv)


class TestMain(unittest.TestCase):
    def test_success(self):
        with unittest.mock.patch('glsnap.__main__.render', return_value=True) as render:
            self.assertEqual(main(['--quiet', '--size', '8', '8']), 0)
        settings = render.call_args.args[0]
        self.assertEqual(settings.size, (8, 8))

    def test_unwritten_image_is_not_fatal(self):
        with unittest.mock.patch('glsnap.__main__.render', return_value=False):
            self.assertEqual(main(['--quiet']), 0)

    def test_fatal(self):
        with unittest.mock.patch('glsnap.__main__.render', side_effect=RenderError("Get EGL display", "EGL error 0x3008")):
            self.assertEqual(main(['--quiet']), FATAL_EXIT_STATUS)
