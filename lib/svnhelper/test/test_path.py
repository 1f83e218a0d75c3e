#===============================================================================
# Imports
#===============================================================================
import os
import doctest
import unittest

import svnhelper.wc
import svnhelper.path
import svnhelper.repo
import svnhelper.merge
import svnhelper.util

from pathlib import (
    PurePosixPath,
)

from svnhelper.path import (
    Uri,
    to_uri,
    base_uri_of,
    glob_match,
    ancestor_chain,
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
        loader.loadTestsFromTestCase(TestBaseUriOf),
        loader.loadTestsFromTestCase(TestUri),
        loader.loadTestsFromTestCase(TestAncestorChain),
        loader.loadTestsFromTestCase(TestDoctests),
    ))

#===============================================================================
# Test Classes
#===============================================================================
class TestBaseUriOf(SvnHelperTest, unittest.TestCase):
    def test_01_siblings_at_different_depths(self):
        uris = [
            's://h/trunk/a/b/master',
            's://h/trunk/a/c/shell',
            's://h/trunk/a/c/shell/master',
        ]
        self.assertEqual(base_uri_of(uris), 's://h/trunk/a')

    def test_02_single_uri(self):
        self.assertEqual(base_uri_of(['s://h/trunk/a']), 's://h/trunk/a')

    def test_03_idempotent(self):
        uris = [
            'file:///repo/project/trunk/lib',
            'file:///repo/project/branches/1.x/lib',
            'file:///repo/project/tags/1.0/doc',
        ]
        base = base_uri_of(uris)
        self.assertEqual(base, 'file:///repo/project')
        self.assertEqual(base_uri_of([base]), base)
        self.assertEqual(base_uri_of([base, base]), base)
        self.assertEqual(base_uri_of(uris + [base]), base)

    def test_04_ancestor_after_descendant(self):
        uris = ['s://h/trunk/a/b/c', 's://h/trunk/a']
        self.assertEqual(base_uri_of(uris), 's://h/trunk/a')

    def test_05_order_does_not_matter(self):
        uris = [
            's://h/x/y/z',
            's://h/x/q',
            's://h/x/y/w/v',
        ]
        expected = 's://h/x'
        self.assertEqual(base_uri_of(uris), expected)
        self.assertEqual(base_uri_of(reversed(uris)), expected)

    def test_06_not_a_string_prefix_match(self):
        # 'trunk/ab' and 'trunk/abc' share a string prefix but not a path.
        uris = ['s://h/trunk/ab', 's://h/trunk/abc']
        self.assertEqual(base_uri_of(uris), 's://h/trunk')

    def test_07_trailing_slashes(self):
        uris = ['s://h/trunk/a/', 's://h/trunk/b/']
        self.assertEqual(base_uri_of(uris), 's://h/trunk')

    def test_08_different_roots(self):
        with self.assertRaises(ValueError):
            base_uri_of(['svn://one/trunk', 'svn://two/trunk'])

    def test_09_relative_local_paths(self):
        self.assertEqual(base_uri_of(['a', 'b']), '.')
        self.assertEqual(base_uri_of(['x/a/b', 'x/c']), 'x')

    def test_10_repository_root(self):
        self.assertEqual(base_uri_of(['s://h/x', 's://h/y']), 's://h')
        self.assertEqual(base_uri_of(['file:///x', 'file:///y']), 'file:///')

    def test_11_empty(self):
        with self.assertRaises(ValueError):
            base_uri_of([])
        with self.assertRaises(ValueError):
            Uri('')

class TestUri(SvnHelperTest, unittest.TestCase):
    def test_01_normalisation(self):
        self.assertEqual(Uri('svn://host/a//b/./c/'), 'svn://host/a/b/c')
        self.assertEqual(Uri('file:///tmp/r/trunk/'), 'file:///tmp/r/trunk')

    def test_02_path_like(self):
        self.assertEqual(to_uri(PurePosixPath('/tmp/wc/a')), '/tmp/wc/a')

    def test_03_to_uri_is_identity_for_uri(self):
        u = Uri('svn://host/a')
        self.assertIs(to_uri(u), u)

    def test_04_join_and_parent(self):
        u = Uri('svn://host/trunk')
        self.assertEqual(u.join('a.txt'), 'svn://host/trunk/a.txt')
        self.assertEqual(u.join('a.txt').parent, u)
        self.assertEqual(u.join('a.txt').name, 'a.txt')

    def test_05_relative_paths(self):
        u = Uri('svn://host/trunk/a/b.txt')
        self.assertEqual(u.relative_path_from('svn://host/trunk'), 'a/b.txt')
        self.assertEqual(
            u.relative_path_from('svn://host/branches/1.x'),
            '../../trunk/a/b.txt',
        )

    def test_06_is_within(self):
        self.assertTrue(Uri('s://h/a/b').is_within('s://h/a'))
        self.assertFalse(Uri('s://h/b').is_within('s://h/a'))
        self.assertFalse(Uri('t://h/a/b').is_within('s://h/a'))

    def test_07_glob_match(self):
        self.assertTrue(glob_match('*.cfg', 'app.cfg'))
        self.assertTrue(glob_match('app.cfg', 'app.cfg'))
        self.assertFalse(glob_match('*.cfg', 'app.cfg.bak'))
        self.assertTrue(glob_match('[ab].txt', 'b.txt'))

    def test_08_glob_skips_dotfiles(self):
        self.assertFalse(glob_match('*', '.hidden'))
        self.assertFalse(glob_match('*ignore', '.svnignore'))
        self.assertTrue(glob_match('.*', '.hidden'))
        self.assertTrue(glob_match('.hidden', '.hidden'))

    def test_09_root_parent(self):
        self.assertEqual(Uri('svn://host/a').parent, 'svn://host')
        self.assertEqual(Uri('svn://host/'), 'svn://host')
        self.assertEqual(Uri('svn://host').parent, 'svn://host')
        self.assertEqual(Uri('svn://host').join('a'), 'svn://host/a')
        self.assertEqual(Uri('a').parent, '.')

class TestAncestorChain(SvnHelperTest, unittest.TestCase):
    def test_01_root_to_leaf(self):
        root = os.path.join(os.sep, 'wc')
        path = os.path.join(root, 'a', 'b', 'c')
        self.assertEqual(
            ancestor_chain(root, path),
            [
                root,
                os.path.join(root, 'a'),
                os.path.join(root, 'a', 'b'),
                os.path.join(root, 'a', 'b', 'c'),
            ]
        )

    def test_02_root_only(self):
        root = os.path.join(os.sep, 'wc')
        self.assertEqual(ancestor_chain(root, root), [ root ])

    def test_03_outside_root(self):
        root = os.path.join(os.sep, 'wc', 'inner')
        with self.assertRaises(ValueError):
            ancestor_chain(root, os.path.join(os.sep, 'wc'))

class TestDoctests(SvnHelperTest, unittest.TestCase):
    def _testmod(self, module):
        (failed, attempted) = doctest.testmod(module, verbose=False)
        self.assertEqual(failed, 0)
        self.assertTrue(attempted > 0)

    def test_01_path(self):
        self._testmod(svnhelper.path)

    def test_02_repo(self):
        self._testmod(svnhelper.repo)

    def test_03_merge(self):
        self._testmod(svnhelper.merge)

    def test_04_wc(self):
        self._testmod(svnhelper.wc)

    def test_05_util(self):
        self._testmod(svnhelper.util)

def main():
    runner = unittest.TextTestRunner()
    runner.run(suite())

if __name__ == '__main__':
    main()

# vim:set ts=8 sw=4 sts=4 tw=78 et:
