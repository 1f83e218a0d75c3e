#===============================================================================
# Imports
#===============================================================================
from svnhelper.util import (
    ProcessWrapper,
)

#===============================================================================
# Globals
#===============================================================================
# Error codes svn emits when the target of a read operation does not exist.
NOT_FOUND_ERROR_CODES = (
    'E155010',
    'E160013',
    'E170000',
    'E200009',
    'W155010',
    'W160013',
    'W170000',
)

# Error codes svn emits when a merge can't be applied at all: unrelated or
# diverged ancestry, or a merge that would leave conflicts behind.
UNMERGEABLE_ERROR_CODES = (
    'E155015',
    'E195012',
    'E195016',
)

#===============================================================================
# Exceptions
#===============================================================================
class CommandFailed(Exception):
    """
    Raised whenever an svn invocation exits with a nonzero status.  The
    first argument is the printable command line, the second is whatever
    the process wrote to stderr.
    """
    @property
    def command_line(self):
        return self.args[0]

    @property
    def stderr(self):
        return self.args[1] if len(self.args) > 1 else ''

    @property
    def is_not_found(self):
        return any(code in self.stderr for code in NOT_FOUND_ERROR_CODES)

    @property
    def is_unmergeable(self):
        return any(code in self.stderr for code in UNMERGEABLE_ERROR_CODES)

    def __str__(self):
        return '%s: %s' % (self.command_line, self.stderr.strip())

#===============================================================================
# Classes
#===============================================================================
class SubversionClient(ProcessWrapper):
    exception_class = CommandFailed

    def __init__(self, exe='svn', *args, **kwds):
        ProcessWrapper.__init__(self, exe, *args, **kwds)
        self.username = kwds.get('username') or str()
        self.password = kwds.get('password') or str()
        self.non_interactive = kwds.get('non_interactive', True)

    def build_command_line(self, exe, action, *args, **kwds):
        kwds = dict(kwds)

        if self.username:
            kwds['username'] = self.username
        if self.password:
            kwds['password'] = self.password
            kwds['no_auth_cache'] = True
        if self.non_interactive:
            kwds['non_interactive'] = True

        return ProcessWrapper.build_command_line(self, exe, action,
                                                 *args, **kwds)

    def printable(self, cmd):
        if not self.password:
            return ProcessWrapper.printable(self, cmd)
        return ' '.join('********' if c == self.password else c for c in cmd)

    def run(self, action, *args, **kwds):
        """
        Run a mutating svn command.  Returns the exit code, which is always
        zero; a nonzero exit raises CommandFailed.
        """
        self.execute(action, *args, **kwds)
        return self.rc

    def capture(self, action, *args, **kwds):
        """
        Run a read-only svn command and return its stdout.
        """
        return self.execute(action, *args, **kwds)

    @classmethod
    def from_config(cls, conf, **kwds):
        return cls(
            conf.svn,
            username=conf.username,
            password=conf.password,
            non_interactive=conf.non_interactive,
            **kwds
        )

# vim:set ts=8 sw=4 sts=4 tw=78 et:
