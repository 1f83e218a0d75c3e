#===============================================================================
# Imports
#===============================================================================
import doctest
import unittest

from svnhelper.constants import (
    w,
    Depth,
    OverwritePolicy,
)

from svnhelper.util import (
    ContextSensitiveObject,
    ImplicitContextSensitiveObject,
    Options,
    ProcessWrapper,
    implicit_context,
)

from svnhelper.test import (
    SvnHelperTest,
)

#===============================================================================
# Helpers
#===============================================================================
def suite():
    loader = unittest.defaultTestLoader
    return unittest.TestSuite((
        loader.loadTestsFromTestCase(TestConstant),
        loader.loadTestsFromTestCase(TestContexts),
        loader.loadTestsFromTestCase(TestOptions),
        loader.loadTestsFromTestCase(TestProcessWrapper),
    ))

class Resource(ContextSensitiveObject):
    def _enter(self):
        return self

    def _exit(self, *exc_info):
        pass

class Counter(ImplicitContextSensitiveObject):
    def __init__(self):
        ImplicitContextSensitiveObject.__init__(self)
        self.enters = 0
        self.exits = 0

    def _enter(self):
        self.enters += 1

    def _exit(self, *exc_info):
        self.exits += 1

    @implicit_context
    def work(self):
        return self.entered

#===============================================================================
# Test Classes
#===============================================================================
class TestConstant(SvnHelperTest, unittest.TestCase):
    def test_01_values(self):
        self.assertEqual(Depth.Empty, 'empty')
        self.assertIn('infinity', Depth)
        self.assertNotIn('Infinity', Depth)
        self.assertEqual(sorted(OverwritePolicy), ['export', 'fail'])

    def test_02_missing_attribute(self):
        self.assertFalse(hasattr(Depth, 'nope'))
        self.assertFalse(hasattr(w, '__wrapped__'))
        with self.assertRaises(AttributeError):
            Depth.nope

    def test_03_read_only(self):
        with self.assertRaises(AttributeError):
            Depth.Empty = 'full'

    def test_04_doctest_finder_accepts_constants(self):
        finder = doctest.DocTestFinder()
        import svnhelper.wc
        self.assertTrue(finder.find(svnhelper.wc))

class TestContexts(SvnHelperTest, unittest.TestCase):
    def test_01_single_use(self):
        r = Resource()
        with r:
            self.assertTrue(r.entered)
            with self.assertRaises(RuntimeError):
                r.__enter__()
        self.assertFalse(r.entered)

    def test_02_exit_on_error(self):
        r = Resource()
        with self.assertRaises(ValueError):
            with r:
                raise ValueError('boom')
        self.assertFalse(r.entered)

    def test_03_implicit_context_is_reentrant(self):
        c = Counter()
        self.assertTrue(c.work())
        self.assertFalse(c.entered)
        with c:
            self.assertTrue(c.work())
            self.assertTrue(c.entered)
        self.assertEqual((c.enters, c.exits), (2, 2))

class TestOptions(SvnHelperTest, unittest.TestCase):
    def test_01_missing_options_are_false(self):
        o = Options(dict(verbose=True))
        self.assertTrue(o.verbose)
        self.assertFalse(o.quiet)
        self.assertFalse(Options().verbose)

class TestProcessWrapper(SvnHelperTest, unittest.TestCase):
    def test_01_private_attributes_are_not_actions(self):
        p = ProcessWrapper('svn')
        self.assertFalse(hasattr(p, '_private'))
        self.assertTrue(callable(p.status))

    def test_02_action_underscores(self):
        p = ProcessWrapper('svnadmin')
        self.assertEqual(
            p.build_command_line('svnadmin', 'set_uuid', '/r', quiet=True),
            ['svnadmin', 'set-uuid', '--quiet', '/r']
        )

def main():
    runner = unittest.TextTestRunner()
    runner.run(suite())

if __name__ == '__main__':
    main()

# vim:set ts=8 sw=4 sts=4 tw=78 et:
