#===============================================================================
# Imports
#===============================================================================
import os

from svnhelper.config import (
    Config,
)

from svnhelper.path import (
    base_uri_of,
)

from svnhelper.transaction import (
    SvnFileCopyTransaction,
)

from svnhelper.command import (
    Command,
    CommandError,
    SubversionCommand,
)

from svnhelper.util import (
    chdir,
    implicit_context,
)

#===============================================================================
# Test Commands
#===============================================================================
class DoctestCommand(Command):
    def run(self):
        self._out("running doctests...")
        import doctest
        import svnhelper.wc
        import svnhelper.util
        import svnhelper.path
        import svnhelper.repo
        import svnhelper.merge
        verbose = not self.options.quiet
        modules = (
            svnhelper.wc,
            svnhelper.path,
            svnhelper.repo,
            svnhelper.merge,
            svnhelper.util,
        )
        for module in modules:
            doctest.testmod(module, verbose=verbose, raise_on_error=True)

class UnittestCommand(Command):
    def run(self):
        import svnhelper.test
        base_dir = self.conf.scratch_dir or os.getcwd()
        with chdir(base_dir):
            single = self.args[0] if self.args else None
            svnhelper.test.main(quiet=self.options.quiet, single=single)

class ListUnitTestClassnamesCommand(Command):
    def run(self):
        import svnhelper.test

        # Transform the 'module_name: class' format to 'module_name.class'.
        class Writer:
            ostream = self.ostream
            def write(self, s):
                self.ostream.write(s.replace(': ', '.'))
        stream = Writer()
        for dummy in svnhelper.test.suites(stream=stream, load=False):
            pass

#===============================================================================
# Configuration Commands
#===============================================================================
class DumpDefaultConfigCommand(Command):
    def run(self):
        cf = Config()
        cf.write(self.ostream)

class DumpConfigCommand(Command):
    def run(self):
        self.conf.write(self.ostream)

class ShowPossibleConfigFileLoadOrderCommand(Command):
    def run(self):
        self._out(os.linesep.join(self.conf.possible_conf_filenames))

class ShowActualConfigFileLoadOrderCommand(Command):
    def run(self):
        self._out(os.linesep.join(self.conf.actual_conf_filenames))

#===============================================================================
# Repository Query Commands
#===============================================================================
class BaseUriCommand(Command):
    def run(self):
        try:
            self._out(base_uri_of(self.args))
        except ValueError as e:
            raise CommandError(str(e))

class ListCommand(SubversionCommand):
    @implicit_context
    def run(self):
        uri = self.args[0]
        entries = self.repo.list(uri, recursive=self.options.recursive)
        self.result = entries
        for entry in entries:
            self._out(entry.name)

class LogCommand(SubversionCommand):
    @implicit_context
    def run(self):
        uri = self.args[0]
        k = dict(
            limit=self.options.limit,
            stop_on_copy=self.options.stop_on_copy,
        )
        entries = self.repo.log(uri, **k)
        self.result = entries
        for e in entries:
            date = e.date.isoformat() if e.date else ''
            self._out('r%d | %s | %s' % (e.revision, e.author, date))
            if e.message:
                self._out(e.message)

class RevisionCommand(SubversionCommand):
    @implicit_context
    def run(self):
        self.result = self.repo.revision(self.args[0])
        self._out(str(self.result))

class CopiedRevisionCommand(SubversionCommand):
    @implicit_context
    def run(self):
        self.result = self.repo.copied_revision(self.args[0])
        self._out(str(self.result))

#===============================================================================
# Working Copy Commands
#===============================================================================
class UpdateDeepCommand(SubversionCommand):
    depth = None

    @implicit_context
    def run(self):
        path = self.args[0]
        k = dict(update_existing=not self.options.new_only)
        if self.depth:
            k['depth'] = self.depth
        self.result = self.wc.update_deep(path, **k)
        for d in self.result:
            self._verbose('updated %s' % d)

#===============================================================================
# Merge Commands
#===============================================================================
class MergeCommand(SubversionCommand):
    revision_range = None

    @implicit_context
    def run(self):
        (start, end) = self._parse_rev_range(self.revision_range)
        if end is None:
            raise CommandError("merge needs a revision range (N:M)")
        from_uri = self.args[0]
        to_path = self.args[1] if len(self.args) > 1 else '.'
        self.result = self.merger.merge1(start, end, from_uri, to_path)

class MergeBranchToTrunkCommand(SubversionCommand):
    @implicit_context
    def run(self):
        from_uri = self.args[0]
        to_path = self.args[1] if len(self.args) > 1 else '.'
        self.result = self.merger.merge_branch_to_trunk(from_uri, to_path)

class ReverseMergeCommand(SubversionCommand):
    revision_range = None

    @implicit_context
    def run(self):
        (start, end) = self._parse_rev_range(self.revision_range)
        path = self.args[0] if self.args else '.'
        self.result = self.merger.reverse_merge(start, end, path)

#===============================================================================
# Transaction Commands
#===============================================================================
class CopyCommand(SubversionCommand):
    message = None

    @implicit_context
    def run(self):
        (from_base, to_base, pattern) = self.args
        t = SvnFileCopyTransaction(from_base, to_base, pattern)
        self.result = self.engine.copy_single(t, self.message)
        if self.result:
            self._out('Committed revision %d.' % self.result)

class CopyMultiCommand(SubversionCommand):
    message = None

    @implicit_context
    def run(self):
        transactions = [
            SvnFileCopyTransaction(*t)
                for t in (self.options.transactions or [])
        ]
        if not transactions:
            raise CommandError("at least one -t/--transaction is required")
        self.result = self.engine.copy_multi(transactions, self.message)
        if self.result:
            self._out('Committed revision %d.' % self.result)

# vim:set ts=8 sw=4 sts=4 tw=78 et:
