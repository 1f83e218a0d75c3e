#===============================================================================
# Imports
#===============================================================================
import os
import sys
import shutil
import inspect
import logging
import tempfile
import unittest

from os.path import (
    isdir,
    abspath,
    dirname,
)

from collections import (
    defaultdict,
)

from svnhelper.exe import (
    CommandFailed,
    SubversionClient,
)

from svnhelper.repo import (
    Repository,
)

from svnhelper.util import (
    try_remove_dir,
    ProcessWrapper,
)

#===============================================================================
# Globals
#===============================================================================
HAVE_SVN = bool(shutil.which('svn') and shutil.which('svnadmin'))

requires_svn = unittest.skipUnless(
    HAVE_SVN,
    "svn and svnadmin are required for repository tests",
)

#===============================================================================
# Fake Command Gateway
#===============================================================================
class FakeSubversionClient(SubversionClient):
    """
    Command gateway double.  Every command line is recorded in `commands`;
    output is scripted per svn action with `on()`.  Later registrations win
    over earlier ones, and a registration can be narrowed to command lines
    containing a given token.
    """
    MUTATING_ACTIONS = (
        'add',
        'checkout',
        'commit',
        'copy',
        'export',
        'merge',
        'revert',
        'update',
    )

    def __init__(self):
        SubversionClient.__init__(self, 'svn', non_interactive=False)
        self.commands = []
        self.handlers = []

    def on(self, action, output='', error=None, match=None):
        self.handlers.append((action, match, output, error))

    def execute(self, *args, **kwds):
        self.rc = 0
        cmd = self.build_command_line(self.exe, *args, **kwds)
        self.cmd = cmd
        self.commands.append(cmd)
        action = cmd[1]
        for (a, match, output, error) in reversed(self.handlers):
            if a != action:
                continue
            if match is not None and match not in cmd:
                continue
            if error is not None:
                self.rc = 1
                raise CommandFailed(self.printable(cmd), error)
            if callable(output):
                return output(cmd)
            return output
        return ''

    @property
    def actions(self):
        return [ c[1] for c in self.commands ]

    @property
    def mutating_commands(self):
        return [
            c for c in self.commands
                if c[1] in self.MUTATING_ACTIONS and '--dry-run' not in c
        ]

    def commands_for(self, action):
        return [ c for c in self.commands if c[1] == action ]

def list_xml(*names):
    """
    Builds `svn list --xml` output; names ending in '/' are directories.
    """
    entries = []
    for name in names:
        kind = 'dir' if name.endswith('/') else 'file'
        entries.append(
            '<entry kind="%s">\n'
            '<name>%s</name>\n'
            '<commit revision="3">\n'
            '<author>test.user</author>\n'
            '<date>2016-03-01T12:00:00.000000Z</date>\n'
            '</commit>\n'
            '</entry>' % (kind, name.rstrip('/'))
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<lists>\n<list path="x">\n%s\n</list>\n</lists>' % '\n'.join(entries)
    )

def log_xml(*revisions):
    """
    Builds `svn log --xml` output in svn's native newest-first order.
    """
    entries = []
    for rev in sorted(revisions, reverse=True):
        entries.append(
            '<logentry revision="%d">\n'
            '<author>test.user</author>\n'
            '<date>2016-03-0%dT12:00:00.000000Z</date>\n'
            '<msg>r%d</msg>\n'
            '</logentry>' % (rev, min(rev, 9), rev)
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<log>\n%s\n</log>' % '\n'.join(entries)
    )

NOT_FOUND = (
    "svn: warning: W160013: URL 'file:///r/missing' non-existent in revision 5\n"
    "svn: E200009: Could not list all targets because some targets don't exist"
)

#===============================================================================
# Classes
#===============================================================================
class TestRepo(object):
    """
    A real repository created with svnadmin at `name`, plus a working copy
    next to it.  Only usable when HAVE_SVN is True.
    """
    keep = False

    def __init__(self, name):
        self.name = name
        self.path = abspath(name)
        self.uri  = 'file://%s' % self.path.replace('\\', '/')
        self.wc   = self.path + '.wc'

        self.svn = SubversionClient('svn')
        self.svnadmin = ProcessWrapper('svnadmin')
        self.repo = Repository(self.svn)

    def create(self, layout=('trunk', 'branches', 'tags')):
        if isdir(self.path):
            shutil.rmtree(self.path)
        self.svnadmin.create(self.path)
        if layout:
            urls = [ '/'.join((self.uri, d)) for d in layout ]
            self.svn.mkdir(*urls, m='Create layout.')

    def checkout(self):
        if isdir(self.wc):
            shutil.rmtree(self.wc)
        self.svn.checkout(self.uri, self.wc)

    def build(self, tree, prefix=''):
        base = os.path.join(self.wc, prefix)
        for (name, data) in tree.items():
            path = os.path.join(base, name)
            if data is None:
                os.makedirs(path, exist_ok=True)
                continue
            os.makedirs(dirname(path), exist_ok=True)
            with open(path, 'w') as f:
                f.write(data)

    def url(self, *parts):
        return '/'.join((self.uri,) + parts)

class SvnHelperTest(object):
    repo = None

    def create_repo(self, checkout=True, **kwds):
        test_name = inspect.currentframe().f_back.f_code.co_name
        repo_name = '_'.join((self.__class__.__name__, test_name))
        base = tempfile.mkdtemp(prefix='svnhelper-test-')
        repo = TestRepo(os.path.join(base, repo_name))
        repo.create(**kwds)
        if checkout:
            repo.checkout()
        if not TestRepo.keep:
            self.addCleanup(try_remove_dir, base)
        self.repo = repo
        return repo

    def create_fake_client(self):
        return FakeSubversionClient()

    def create_scratch_dir(self):
        d = tempfile.mkdtemp(prefix='svnhelper-scratch-')
        self.addCleanup(try_remove_dir, d)
        return d

#===============================================================================
# Helpers
#===============================================================================
def test_module_names():
    path = abspath(__file__)
    base = dirname(path)
    return [
        'svnhelper.test.%s' % f[:-len('.py')]
            for f in os.listdir(base) if (
                f.startswith('test_') and
                f.endswith('.py')
            )
    ]

def import_all(names):
    import importlib
    return [ importlib.import_module(name) for name in names ]

def _test_classes(cls):
    for sc in cls.__subclasses__():
        if issubclass(sc, unittest.TestCase):
            yield sc
        for ssc in _test_classes(sc):
            yield ssc

def all_tests():
    import_all(test_module_names())
    tests = defaultdict(list)
    for test_class in _test_classes(SvnHelperTest):
        classes = tests[test_class.__module__]
        if test_class not in classes:
            classes.append(test_class)

    return tests

def announce(stream, module_name, test_class):
    stream.write('%s: %s\n' % (module_name, test_class))

def suites(stream, single=None, load=True):
    loader = unittest.defaultTestLoader
    for (module_name, classes) in sorted(all_tests().items()):
        for test_class in classes:
            classname = test_class.__name__
            if single and not classname.endswith(single):
                continue
            announce(stream, module_name, classname)
            if load:
                tests = loader.loadTestsFromTestCase(test_class)
            else:
                tests = None
            yield tests

class capture_logs(object):
    """
    Collects records logged to the 'svnhelper' logger hierarchy while the
    context is active.
    """
    class _Handler(logging.Handler):
        def __init__(self, records):
            logging.Handler.__init__(self, logging.DEBUG)
            self.records = records

        def emit(self, record):
            self.records.append(record)

    def __init__(self, level=logging.WARNING):
        self.level = level
        self.records = []
        self.logger = logging.getLogger('svnhelper')
        self.handler = self._Handler(self.records)
        self.old_level = None

    def __enter__(self):
        self.old_level = self.logger.level
        self.logger.setLevel(self.level)
        self.logger.addHandler(self.handler)
        return self

    def __exit__(self, *exc_info):
        self.logger.removeHandler(self.handler)
        self.logger.setLevel(self.old_level)

    @property
    def messages(self):
        return [ r.getMessage() for r in self.records ]

#===============================================================================
# Main
#===============================================================================
def main(quiet=None, single=None):
    if quiet:
        stream = open(os.devnull, 'w')
    else:
        stream = sys.stdout

    verbosity = int(not quiet)
    runner = unittest.TextTestRunner(
        stream=stream,
        verbosity=verbosity,
    )
    failed = 0

    if single:
        TestRepo.keep = True

    for suite in suites(stream, single):
        result = runner.run(suite)
        if not result.wasSuccessful():
            failed += 1

    if failed:
        sys.stderr.write('\n*** FAILURES: %d ***\n' % failed)
        sys.exit(1)

# vim:set ts=8 sw=4 sts=4 tw=78 et:
