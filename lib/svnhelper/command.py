#===============================================================================
# Imports
#===============================================================================
from abc import (
    ABCMeta,
    abstractmethod,
)

from svnhelper.exe import (
    SubversionClient,
)

from svnhelper.repo import (
    Repository,
)

from svnhelper.wc import (
    WorkingCopy,
)

from svnhelper.merge import (
    Merger,
)

from svnhelper.transaction import (
    TransactionEngine,
)

from svnhelper.util import (
    add_linesep_if_missing,
    Options,
    ImplicitContextSensitiveObject,
)

#===============================================================================
# Commands
#===============================================================================
class CommandError(Exception):
    pass

class Command(ImplicitContextSensitiveObject, metaclass=ABCMeta):

    def __init__(self, istream, ostream, estream):
        ImplicitContextSensitiveObject.__init__(self)
        self.istream = istream
        self.ostream = ostream
        self.estream = estream

        self.conf = None
        self.args = None
        self.result = None
        self.options = Options()

    def _enter(self):
        self._allocate()

    def _exit(self, *exc_info):
        self._deallocate()

    def _allocate(self):
        pass

    def _deallocate(self):
        pass

    def _verbose(self, msg):
        if self.options.verbose:
            self.ostream.write(add_linesep_if_missing(msg))

    def _out(self, msg):
        # Suppressed by -q/--quiet.
        if not self.options.quiet:
            self.ostream.write(add_linesep_if_missing(msg))

    @abstractmethod
    def run(self):
        raise NotImplementedError

class SubversionCommand(Command):
    """
    Base class for commands that talk to svn.  The gateway and the layers
    built on it are created from the loaded configuration when the command's
    context is entered.
    """
    client = None
    repo = None
    wc = None
    merger = None
    engine = None

    def _allocate(self):
        assert self.conf is not None
        self.client = SubversionClient.from_config(
            self.conf,
            verbose=self.options.verbose,
            ostream=self.ostream,
            estream=self.estream,
        )
        self.repo = Repository(self.client, self.conf.use_listing_cache)
        self.wc = WorkingCopy(self.client, self.repo)
        self.merger = Merger(self.client, self.repo)
        self.engine = TransactionEngine.from_config(
            self.conf,
            self.client,
            repo=self.repo,
        )

    def _deallocate(self):
        self.engine = None
        self.merger = None
        self.wc = None
        self.repo = None
        self.client = None

    def _parse_rev(self, text):
        if text.upper() == 'HEAD':
            return 'HEAD'
        try:
            r = int(text)
        except ValueError:
            raise CommandError("invalid revision: '%s'" % text)
        if r < 0:
            raise CommandError("invalid revision: '%d'" % r)
        return r

    def _parse_rev_range(self, text):
        if not text:
            raise CommandError("missing revision range")
        if ':' not in text:
            return (self._parse_rev(text), None)
        (start, end) = text.split(':', 1)
        return (self._parse_rev(start), self._parse_rev(end))

# vim:set ts=8 sw=4 sts=4 tw=78 et:
