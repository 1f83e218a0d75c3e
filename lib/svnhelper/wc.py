#===============================================================================
# Imports
#===============================================================================
import os
import re
import logging
import tempfile

from svnhelper.exe import (
    CommandFailed,
)

from svnhelper.path import (
    to_uri,
    ancestor_chain,
)

from svnhelper.util import (
    requires_context,
    try_remove_dir,
    ContextSensitiveObject,
)

from svnhelper.constants import (
    w, # Warnings
    Depth,
)

#===============================================================================
# Globals
#===============================================================================
logger = logging.getLogger(__name__)

COMMITTED_REVISION = re.compile(r'^Committed revision (\d+)\.', re.MULTILINE)

#===============================================================================
# Exceptions
#===============================================================================
class CommitFailed(CommandFailed):
    pass

#===============================================================================
# Helpers
#===============================================================================
def parse_committed_revision(output):
    """
    >>> parse_committed_revision('Sending a.txt\\nCommitted revision 12.')
    12
    >>> parse_committed_revision('') is None
    True
    """
    match = COMMITTED_REVISION.search(output or '')
    if match:
        return int(match.group(1))

def nearest_existing_path(path):
    existing = path
    while not os.path.exists(existing):
        parent = os.path.dirname(existing)
        if parent == existing:
            break
        existing = parent
    return existing

#===============================================================================
# Classes
#===============================================================================
class ScratchWorkingCopy(ContextSensitiveObject):
    """
    Temporary directory that holds a throwaway checkout.  The directory is
    created on entry and removed on exit, whether or not an exception is
    propagating.
    """
    def __init__(self, prefix='svnhelper-', dir=None):
        ContextSensitiveObject.__init__(self)
        self.prefix = prefix
        self.dir = dir
        self._path = None

    def _enter(self):
        self._path = tempfile.mkdtemp(prefix=self.prefix, dir=self.dir)
        logger.debug('created scratch working copy %s', self._path)
        return self

    def _exit(self, *exc_info):
        try_remove_dir(self._path)
        logger.debug('removed scratch working copy %s', self._path)

    @property
    @requires_context
    def path(self):
        return self._path

    @requires_context
    def join(self, *parts):
        return os.path.join(self._path, *parts)

class WorkingCopy(object):
    """
    Mutating operations against working copies (and the remote copy that
    doesn't need one).  Every call goes through the command gateway.
    """
    def __init__(self, client, repo):
        self.client = client
        self.repo = repo

    def checkout(self, uri, path, depth=None):
        return self.client.run('checkout', to_uri(uri), path, depth=depth)

    def update(self, path, depth=None):
        return self.client.run('update', path, set_depth=depth)

    def update_deep(self, path, depth=Depth.Empty, update_existing=True):
        """
        Make `path` usable in a sparse working copy by updating every
        directory between the working copy root and `path`, root first.
        Directories already on disk get a normal update (unless
        `update_existing` is False); missing ones are pulled in with
        `--set-depth depth`.
        """
        path = os.path.abspath(os.fspath(path))
        existing = nearest_existing_path(path)
        root = os.path.realpath(self.repo.working_copy_root_path(existing))
        path = os.path.normpath(
            os.path.join(
                os.path.realpath(existing),
                os.path.relpath(path, existing),
            )
        )

        updated = []
        for d in ancestor_chain(root, path):
            if os.path.exists(d):
                if not update_existing:
                    continue
                self.update(d)
            else:
                self.update(d, depth)
            updated.append(d)
        return updated

    def export(self, uri, path, force=False):
        return self.client.run('export', to_uri(uri), path, force=force)

    def add(self, path, force=False, parents=False):
        return self.client.run('add', path, force=force, parents=parents)

    def copy(self, sources, destination, parents=True, message=None):
        """
        `svn copy` of one or more sources.  When `message` is given the copy
        is a remote operation that commits immediately.
        """
        sources = [ to_uri(s) for s in sources ]
        assert sources
        k = dict(parents=parents)
        if message is not None:
            k['m'] = message
        args = sources + [ destination ]
        output = self.client.capture('copy', *args, **k)
        if message is not None:
            self.repo.invalidate_listings()
            return parse_committed_revision(output)

    def revert(self, path):
        return self.client.run('revert', path, R=True)

    def commit(self, message, path='.'):
        """
        Commit everything under `path`.  An unchanged working copy is
        reverted and a warning is logged instead of creating an empty
        revision.  Returns the new revision number, or None.
        """
        rev = None
        if not self.repo.status(path).strip():
            self.revert(path)
            logger.warning(w.NoChange, message)
        else:
            try:
                output = self.client.capture('commit', path, m=message)
            except CommandFailed as e:
                raise CommitFailed(*e.args)
            rev = parse_committed_revision(output)
            self.repo.invalidate_listings()
            logger.info('committed r%s: %s', rev, message)
        self.update(path)
        return rev

# vim:set ts=8 sw=4 sts=4 tw=78 et:
