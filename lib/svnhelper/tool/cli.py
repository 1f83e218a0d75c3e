#===============================================================================
# Imports
#===============================================================================
import sys
import textwrap

import svnhelper.tool.commands

from svnhelper.cli import (
    CLI,
    CommandLine,
)

#===============================================================================
# Classes
#===============================================================================
class ToolCommandLine(CommandLine):
    @property
    def commands_module(self):
        return svnhelper.tool.commands

class ToolCLI(CLI):

    @property
    def program_name(self):
        return 'svnhelper'

    @property
    def commandline_subclasses(self):
        return ToolCommandLine.__subclasses__()

#===============================================================================
# Test Command Lines
#===============================================================================
class DoctestCommandLine(ToolCommandLine):
    _quiet_ = True
    _description_ = "Run all svnhelper doctests."

class UnittestCommandLine(ToolCommandLine):
    _quiet_ = True
    _conf_ = True
    _vargc_ = True
    _usage_ = '%prog [options] [unit-test-classname]'
    _description_ = textwrap.dedent("""\
        Run all or individual unit tests.

        Tests that need real repositories create them with `svnadmin` inside
        the configured scratch-dir (or the current directory) and are skipped
        when `svn` or `svnadmin` can't be found.
    """)

class ListUnitTestClassnamesCommandLine(ToolCommandLine):
    _description_ = "List svnhelper unit test class names."

#===============================================================================
# Configuration Command Lines
#===============================================================================
class DumpDefaultConfigCommandLine(ToolCommandLine):
    pass

class DumpConfigCommandLine(ToolCommandLine):
    _conf_ = True

class ShowPossibleConfigFileLoadOrderCommandLine(ToolCommandLine):
    _conf_ = True

class ShowActualConfigFileLoadOrderCommandLine(ToolCommandLine):
    _conf_ = True

#===============================================================================
# Repository Query Command Lines
#===============================================================================
class BaseUriCommandLine(ToolCommandLine):
    _vargc_ = True
    _usage_ = '%prog URI [URI ...]'
    _description_ = "Print the deepest URI that all given URIs live under."

    def _validate(self):
        if not self.args:
            self.usage_error("at least one URI is required")

class ListCommandLine(ToolCommandLine):
    _conf_ = True
    _argc_ = 1
    _verbose_ = True
    _aliases_ = ('ls',)
    _usage_ = '%prog [options] URI'

    def _add_options(self):
        self.parser.add_option(
            '-R', '--recursive',
            dest='recursive',
            action='store_true',
            default=False,
            help="list recursively [default: %default]"
        )

class LogCommandLine(ToolCommandLine):
    _conf_ = True
    _argc_ = 1
    _verbose_ = True
    _usage_ = '%prog [options] URI'

    def _add_options(self):
        self.parser.add_option(
            '-l', '--limit',
            dest='limit',
            type='int',
            default=None,
            help="maximum number of log entries"
        )
        self.parser.add_option(
            '--stop-on-copy',
            dest='stop_on_copy',
            action='store_true',
            default=False,
            help="don't cross copies [default: %default]"
        )

class RevisionCommandLine(ToolCommandLine):
    _conf_ = True
    _argc_ = 1
    _verbose_ = True
    _usage_ = '%prog [options] URI'
    _description_ = "Print the revision of the most recent change to URI."

class CopiedRevisionCommandLine(ToolCommandLine):
    _conf_ = True
    _argc_ = 1
    _verbose_ = True
    _usage_ = '%prog [options] URI'
    _description_ = "Print the revision URI was copied (branched) at."

#===============================================================================
# Working Copy Command Lines
#===============================================================================
class UpdateDeepCommandLine(ToolCommandLine):
    _conf_ = True
    _argc_ = 1
    _depth_ = True
    _verbose_ = True
    _usage_ = '%prog [options] PATH'
    _description_ = textwrap.dedent("""\
        Update every directory between the working copy root and PATH so
        PATH becomes usable in a sparse checkout.  Directories that don't
        exist yet are pulled in with --depth.
    """)

    def _add_options(self):
        self.parser.add_option(
            '--new-only',
            dest='new_only',
            action='store_true',
            default=False,
            help="only update directories that don't exist yet "
                 "[default: %default]"
        )

#===============================================================================
# Merge Command Lines
#===============================================================================
class MergeCommandLine(ToolCommandLine):
    _conf_ = True
    _vargc_ = True
    _verbose_ = True
    _rev_range_ = True
    _usage_ = '%prog [options] -r N:M FROM_URI [TO_PATH]'
    _description_ = textwrap.dedent("""\
        Merge a revision range after a dry run.  Nothing is merged if the
        dry run reports a conflict.
    """)

    def _validate(self):
        if len(self.args) not in (1, 2):
            self.usage_error("invalid number of arguments")

class MergeBranchToTrunkCommandLine(ToolCommandLine):
    _conf_ = True
    _vargc_ = True
    _verbose_ = True
    _usage_ = '%prog [options] FROM_URI [TO_PATH]'
    _description_ = "Merge everything since FROM_URI was branched."

    def _validate(self):
        if len(self.args) not in (1, 2):
            self.usage_error("invalid number of arguments")

class ReverseMergeCommandLine(ToolCommandLine):
    _conf_ = True
    _vargc_ = True
    _verbose_ = True
    _rev_range_ = True
    _usage_ = '%prog [options] -r N[:M] [PATH]'
    _description_ = textwrap.dedent("""\
        Revert a single change (-r N) or a range of changes (-r N:M) in
        PATH by merging them in reverse.
    """)

    def _validate(self):
        if len(self.args) > 1:
            self.usage_error("invalid number of arguments")

#===============================================================================
# Transaction Command Lines
#===============================================================================
class CopyCommandLine(ToolCommandLine):
    _conf_ = True
    _argc_ = 3
    _verbose_ = True
    _message_ = True
    _aliases_ = ('cp',)
    _usage_ = '%prog [options] -m MSG FROM_BASE TO_BASE PATTERN'
    _description_ = textwrap.dedent("""\
        Copy every file under FROM_BASE matching PATTERN to TO_BASE in a
        single commit.  Files that already exist at TO_BASE are merged.
    """)

class CopyMultiCommandLine(ToolCommandLine):
    _conf_ = True
    _verbose_ = True
    _message_ = True
    _usage_ = '%prog [options] -m MSG -t FROM_BASE TO_BASE PATTERN [-t ...]'
    _description_ = textwrap.dedent("""\
        Apply several copy transactions, possibly in unrelated parts of the
        repository, as a single commit.
    """)

    def _add_options(self):
        self.parser.add_option(
            '-t', '--transaction',
            dest='transactions',
            nargs=3,
            action='append',
            metavar='FROM_BASE TO_BASE PATTERN',
            help="transaction to apply (may be given more than once)"
        )

#===============================================================================
# Main
#===============================================================================
def main(args=None):
    if args is None:
        args = sys.argv[1:]
    ToolCLI(list(args))

if __name__ == '__main__':
    main()

# vim:set ts=8 sw=4 sts=4 tw=78 et:
