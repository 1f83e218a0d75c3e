#===============================================================================
# Imports
#===============================================================================
import os
import re
import sys
import optparse

import svnhelper

from abc import (
    ABCMeta,
    abstractmethod,
)

from collections import (
    OrderedDict,
)

from svnhelper.config import (
    Config,
    ConfigError,
)

from svnhelper.command import (
    CommandError,
)

from svnhelper.exe import (
    CommandFailed,
)

from svnhelper.repo import (
    RepositoryError,
)

from svnhelper.merge import (
    MergeConflict,
)

from svnhelper.transaction import (
    SourceNotFound,
)

from svnhelper.constants import (
    Depth,
)

from svnhelper.util import (
    add_linesep_if_missing,
    prepend_error_if_missing,
    Options,
)

#===============================================================================
# Globals
#===============================================================================
# Failures that end a subcommand with '<prog> <subcommand> failed: <msg>' on
# stderr and exit status 1 instead of a traceback.
REPORTED_ERRORS = (
    CommandError,
    CommandFailed,
    ConfigError,
    MergeConflict,
    SourceNotFound,
    RepositoryError,
)

CLASS_NAME_WORDS = re.compile('[A-Z][^A-Z]*')

#===============================================================================
# CLI
#===============================================================================
class CLI(object):
    """
    Entry point for a program made of `CommandLine` subcommands.  Running
    the CLI always ends the process: 0 on success, 1 for usage errors and
    reported failures.
    """
    def __init__(self, args):
        self.commandlines = OrderedDict()
        self.shortnames = dict()
        by_name = lambda c: c.__name__
        for cls in sorted(self.commandline_subclasses, key=by_name):
            self._register(cls(self.program_name))
        self.dispatch(list(args))

    @property
    def program_name(self):
        raise NotImplementedError()

    @property
    def commandline_subclasses(self):
        raise NotImplementedError()

    @property
    def usage_hint(self):
        return "Type '%s help' for usage." % self.program_name

    def _register(self, cl):
        for name in (cl.name,) + cl.aliases:
            if name in self.commandlines:
                raise RuntimeError("duplicate subcommand: %s" % name)
            self.commandlines[name] = cl
        if cl.shortname:
            if cl.shortname in self.shortnames:
                raise RuntimeError("duplicate short name: %s" % cl.shortname)
            self.shortnames[cl.shortname] = cl

    def find(self, name):
        return self.commandlines.get(name) or self.shortnames.get(name)

    def dispatch(self, args):
        if not args:
            self.help()

        name = args.pop(0).lower()
        if name == 'help':
            self.help(args)
        if name in ('version', '-v', '--version'):
            self.version()

        cl = self.find(name)
        if cl is None:
            self._error(
                "Unknown subcommand '%s'%s%s" % (
                    name,
                    os.linesep,
                    self.usage_hint,
                )
            )

        try:
            cl.run(args)
        except REPORTED_ERRORS as e:
            msg = '%s %s failed: %s' % (self.program_name, cl.name, e)
            self._error(prepend_error_if_missing(msg))
        self._exit(0)

    def _exit(self, code):
        sys.exit(code)

    def _error(self, msg):
        sys.stderr.write(add_linesep_if_missing(msg))
        self._exit(1)

    def version(self):
        sys.stdout.write(add_linesep_if_missing(svnhelper.__version__))
        self._exit(0)

    def help(self, args=None):
        if args:
            self.dispatch([ args[0], '-h' ])

        lines = [
            'usage: %s <subcommand> [options] [args]' % self.program_name,
            "Type '%s help <subcommand>' for help on a specific subcommand."
                % self.program_name,
            '',
            'Available subcommands:',
        ]
        seen = set()
        for cl in self.commandlines.values():
            if cl.name in seen:
                continue
            seen.add(cl.name)
            extra = [ n for n in (cl.shortname,) + cl.aliases if n ]
            entry = cl.name
            if extra:
                entry += ' (%s)' % ', '.join(extra)
            lines.append('    ' + entry)
        lines.append('    help')
        lines.append('    version')
        self._error(os.linesep.join(lines))

#===============================================================================
# CommandLine
#===============================================================================
class CommandHelpFormatter(optparse.IndentedHelpFormatter):
    # Descriptions are pre-formatted with textwrap.dedent(); keep their
    # line breaks instead of re-flowing them.
    def format_description(self, description):
        return description + '\n' if description else ''

class CommandLine(metaclass=ABCMeta):
    """
    Binds a `Command` class to an optparse parser.  Both the subcommand
    name and the command class come from the class name:
    `UpdateDeepCommandLine` is the 'update-deep' subcommand (short name
    'ud') and runs `commands_module.UpdateDeepCommand`.

    The `_flag_` class attributes switch on the options shared by several
    subcommands; `_add_options()` and `_validate()` are the per-subcommand
    hooks.
    """
    _conf_ = False
    _argc_ = 0
    _vargc_ = None
    _usage_ = None
    _quiet_ = None
    _depth_ = None
    _verbose_ = None
    _message_ = None
    _command_ = None
    _aliases_ = None
    _rev_range_ = None
    _shortname_ = None
    _description_ = None

    @property
    @abstractmethod
    def commands_module(self):
        raise NotImplementedError()

    def __init__(self, program_name):
        self.program_name = program_name

        classname = self.__class__.__name__
        words = CLASS_NAME_WORDS.findall(classname)
        if words[-2:] != [ 'Command', 'Line' ]:
            raise TypeError("%s: name must end in 'CommandLine'" % classname)

        if self._command_ is not None:
            self.command_class = self._command_
        else:
            name = ''.join(words[:-1])
            self.command_class = getattr(self.commands_module, name)

        words = [ w.lower() for w in words[:-2] ]
        self.name = '-'.join(words)
        self.shortname = self._shortname_
        if self.shortname is None and len(words) > 1:
            self.shortname = ''.join(w[0] for w in words)
        self.aliases = tuple(self._aliases_ or ())

        self.parser = None
        self.options = None
        self.args = None
        self.command = None

    def _add_options(self):
        pass

    def _validate(self):
        pass

    def usage_error(self, msg):
        self.parser.print_help(sys.stderr)
        sys.stderr.write("\nerror: %s\n" % msg)
        self.parser.exit(status=1)

    def _create_parser(self):
        self.parser = optparse.OptionParser(
            prog='%s %s' % (self.program_name, self.name),
            usage=self._usage_,
            description=self._description_,
            formatter=CommandHelpFormatter(),
        )
        add = self.parser.add_option

        if self._verbose_:
            add('-v', '--verbose', action='store_true', default=False,
                help="echo svn commands and their output")
        if self._quiet_:
            add('-q', '--quiet', action='store_true', default=False,
                help="only print errors")
        if self._conf_:
            add('-c', '--conf', metavar='FILE',
                help="also load configuration from FILE")
        if self._message_:
            add('-m', '--message', metavar='MSG', help="commit log message")
        if self._rev_range_:
            add('-r', dest='revision_range', metavar='N[:M]',
                help="revision or revision range")
        if self._depth_:
            add('--depth', metavar='DEPTH', choices=sorted(Depth.keys()),
                default=Depth.Empty,
                help="depth for directories that don't exist yet "
                     "[default: %default]")

        self._add_options()

    def _check_argc(self):
        if self._vargc_ or len(self.args) == self._argc_:
            return
        self.usage_error("invalid number of arguments")

    def _load_config(self):
        conf = Config()
        filename = self.options.conf if self._conf_ else None
        if filename and not os.path.exists(filename):
            self.usage_error("configuration file '%s' does not exist" %
                             filename)
        conf.load(filename=filename or None)
        conf.configure_logging(verbose=self.options.verbose)
        return conf

    def _create_command(self, conf):
        command = self.command_class(sys.stdin, sys.stdout, sys.stderr)
        command.conf = conf
        command.args = self.args
        command.options = self.options

        if self._message_:
            if not self.options.message:
                self.usage_error("missing option: -m/--message")
            command.message = self.options.message
        if self._rev_range_:
            command.revision_range = self.options.revision_range
        if self._depth_:
            command.depth = self.options.depth
        return command

    def run(self, args):
        self._create_parser()
        (opts, self.args) = self.parser.parse_args(args)
        self.options = Options(vars(opts))
        self._check_argc()
        self._validate()

        self.command = self._create_command(self._load_config())
        with self.command:
            self.command.run()
        return self.command.result

# vim:set ts=8 sw=4 sts=4 tw=78 et:
