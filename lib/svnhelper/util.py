#===============================================================================
# Imports
#===============================================================================
import os
import sys
import shutil
import logging

from functools import (
    wraps,
)

from subprocess import (
    Popen,
    PIPE,
)

#===============================================================================
# Globals
#===============================================================================
logger = logging.getLogger(__name__)

#===============================================================================
# Helper Methods
#===============================================================================
def requires_context(f):
    @wraps(f)
    def wrapper(self, *args, **kwds):
        if not self.entered:
            raise RuntimeError(
                "%s.%s must be called inside a 'with' block" % (
                    self.__class__.__name__,
                    f.__name__,
                )
            )
        return f(self, *args, **kwds)
    return wrapper

def implicit_context(f):
    """
    Runs `f` inside the object's context, entering it first if the caller
    hasn't.
    """
    @wraps(f)
    def wrapper(self, *args, **kwds):
        if self.entered:
            return f(self, *args, **kwds)
        with self:
            return f(self, *args, **kwds)
    return wrapper

def add_linesep_if_missing(s):
    return s if s.endswith(os.linesep) else s + os.linesep

def prepend_error_if_missing(s):
    if not s.startswith('error: '):
        s = 'error: ' + s
    return add_linesep_if_missing(s)

def file_exists_and_not_empty(path):
    """
    Returns the absolute form of `path` if it names a non-empty file, None
    otherwise.
    """
    if not path:
        return
    path = os.path.abspath(path)
    try:
        if os.path.isfile(path) and os.stat(path).st_size > 0:
            return path
    except OSError:
        return

def try_remove_dir(path):
    if path:
        shutil.rmtree(path, ignore_errors=True)

class chdir(object):
    def __init__(self, path):
        self.path = path
        self.old_path = None

    def __enter__(self):
        self.old_path = os.getcwd()
        os.chdir(self.path)
        return self

    def __exit__(self, *exc_info):
        os.chdir(self.old_path)

#===============================================================================
# Helper Classes
#===============================================================================
class Constant(dict):
    """
    Groups related string constants.  Attributes hold the values; the dict
    maps each value back to its attribute name, so `value in Depth` checks
    for a valid value.

    >>> class _Colour(Constant):
    ...     Red = 'red'
    >>> Colour = _Colour()
    >>> Colour.Red
    'red'
    >>> 'red' in Colour, 'blue' in Colour
    (True, False)
    >>> hasattr(Colour, 'Blue')
    False
    """
    def __init__(self):
        for (name, value) in vars(self.__class__).items():
            if name.startswith('_') or callable(value):
                continue
            self[value] = name

    def __getattr__(self, name):
        # Only reached for names that aren't class attributes.
        raise AttributeError(name)

    def __setattr__(self, name, value):
        raise AttributeError("%s is read-only" % self.__class__.__name__)

class ContextSensitiveObject(object):
    """
    Base for objects that hold a resource for exactly one `with` block.
    Subclasses implement `_enter()` (returning self) and `_exit()`.
    """
    def __init__(self, *args, **kwds):
        self.entered = False

    def __enter__(self):
        if self.entered:
            raise RuntimeError(
                "%s is already in use" % self.__class__.__name__
            )
        result = self._enter()
        self.entered = True
        return result

    def __exit__(self, *exc_info):
        try:
            self._exit(*exc_info)
        finally:
            self.entered = False

    def _enter(self):
        raise NotImplementedError

    def _exit(self, *exc_info):
        raise NotImplementedError

class ImplicitContextSensitiveObject(object):
    """
    Like `ContextSensitiveObject`, but re-entrant: `_enter()` runs when the
    outermost `with` block is entered and `_exit()` when it is left.
    """
    def __init__(self, *args, **kwds):
        self.context_depth = 0

    @property
    def entered(self):
        return self.context_depth > 0

    def __enter__(self):
        if self.context_depth == 0:
            self._enter()
        self.context_depth += 1
        return self

    def __exit__(self, *exc_info):
        self.context_depth -= 1
        if self.context_depth == 0:
            self._exit(*exc_info)

    def _enter(self):
        raise NotImplementedError

    def _exit(self, *exc_info):
        raise NotImplementedError

class Options(dict):
    """
    Parsed command line options; options a subcommand doesn't define read
    as False.
    """
    def __init__(self, values=None):
        dict.__init__(self, values or {})

    def __getattr__(self, name):
        return self.get(name, False)

#===============================================================================
# Processes
#===============================================================================
class ProcessWrapper(object):
    """
    Runs `exe` with the first argument as its subcommand:

        svn.update(path, set_depth='infinity')

    runs `svn update --set-depth infinity <path>`.  Keyword arguments
    become options (see `build_command_line`); a nonzero exit raises
    `exception_class(printable_command_line, stderr)`.
    """
    exception_class = RuntimeError

    def __init__(self, exe, *args, **kwds):
        self.exe = exe
        self.cwd = kwds.get('cwd')
        self.verbose = kwds.get('verbose', False)
        self.ostream = kwds.get('ostream', sys.stdout)
        self.estream = kwds.get('estream', sys.stderr)
        self.rc = 0
        self.cmd = None
        self.output = ''
        self.error = ''

    def __getattr__(self, action):
        if action.startswith('_'):
            raise AttributeError(action)
        return lambda *args, **kwds: self.execute(action, *args, **kwds)

    def option_args(self, kwds):
        """
        >>> ProcessWrapper('svn').option_args(dict(r='1:5', dry_run=True))
        ['-r', '1:5', '--dry-run']
        >>> ProcessWrapper('svn').option_args(dict(force=False, depth=None))
        []
        """
        args = []
        for (name, value) in kwds.items():
            if value is None or value is False:
                continue
            dashes = '-' if len(name) == 1 else '--'
            args.append(dashes + name.replace('_', '-'))
            if value is not True:
                args.append(str(value))
        return args

    def build_command_line(self, exe, action, *args, **kwds):
        return (
            [ exe, action.replace('_', '-') ] +
            self.option_args(kwds) +
            [ str(a) for a in args ]
        )

    def printable(self, cmd):
        return ' '.join(cmd)

    def execute(self, action, *args, **kwds):
        self.cmd = self.build_command_line(self.exe, action, *args, **kwds)
        printable = self.printable(self.cmd)
        cwd = self.cwd or os.getcwd()
        logger.debug('%s>%s', cwd, printable)
        if self.verbose:
            self.ostream.write('%s>%s\n' % (cwd, printable))

        p = Popen(
            self.cmd,
            cwd=self.cwd,
            stdin=PIPE,
            stdout=PIPE,
            stderr=PIPE,
            universal_newlines=True,
        )
        (self.output, self.error) = p.communicate()
        self.rc = p.returncode

        if self.verbose:
            self.ostream.write(self.output)
            self.estream.write(self.error)

        if self.rc != 0:
            raise self.exception_class(
                printable,
                self.error or self.output or 'exit status %d' % self.rc,
            )
        if self.output.endswith('\n'):
            self.output = self.output[:-1]
        return self.output

# vim:set ts=8 sw=4 sts=4 tw=78 et:
