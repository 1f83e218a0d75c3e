#===============================================================================
# Imports
#===============================================================================
import logging

from collections import (
    namedtuple,
)

from svnhelper.path import (
    to_uri,
)

from svnhelper.constants import (
    STATUS_CODE_CHARS,
    STATUS_CODE_WIDTH,
    STATUS_PATH_OFFSET,
    CONFLICT_MARKER,
)

#===============================================================================
# Globals
#===============================================================================
logger = logging.getLogger(__name__)

#===============================================================================
# Exceptions
#===============================================================================
class MergeConflict(Exception):
    """
    Raised when a dry run reports conflicts.  The real merge has not been
    run.  `args` is (paths, command_line).
    """
    @property
    def paths(self):
        return self.args[0]

    @property
    def command_line(self):
        return self.args[1]

    def __str__(self):
        return 'merge would conflict on %s: %s' % (
            ', '.join(self.paths),
            self.command_line,
        )

#===============================================================================
# Records
#===============================================================================
class MergeStatusLine(namedtuple('MergeStatusLine', 'status_code path')):
    __slots__ = ()

    @property
    def is_conflicted(self):
        return CONFLICT_MARKER in self.status_code

#===============================================================================
# Parsers
#===============================================================================
def parse_merge_status_line(line):
    """
    Splits a fixed-width notification line into its status code and path.
    Returns None for anything that isn't a status line.

    >>> parse_merge_status_line('C    trunk/a.txt')
    MergeStatusLine(status_code='C   ', path='trunk/a.txt')
    >>> parse_merge_status_line(' U   .')
    MergeStatusLine(status_code=' U  ', path='.')
    >>> parse_merge_status_line('   C dir')
    MergeStatusLine(status_code='   C', path='dir')
    >>> parse_merge_status_line("--- Merging r2 through r4 into 'a.txt':")
    >>> parse_merge_status_line('  Text conflicts: 1')
    >>> parse_merge_status_line('')
    """
    line = line.rstrip('\r\n')
    if len(line) <= STATUS_PATH_OFFSET:
        return None
    code = line[:STATUS_CODE_WIDTH]
    if line[STATUS_CODE_WIDTH] != ' ':
        return None
    if not code.strip():
        return None
    if any(c not in STATUS_CODE_CHARS for c in code):
        return None
    path = line[STATUS_PATH_OFFSET:]
    if not path.strip():
        return None
    return MergeStatusLine(code, path)

def parse_merge_status(output):
    lines = []
    for line in output.splitlines():
        status = parse_merge_status_line(line)
        if status is not None:
            lines.append(status)
    return lines

#===============================================================================
# Classes
#===============================================================================
class Merger(object):
    def __init__(self, client, repo):
        self.client = client
        self.repo = repo

    def merge_command_line(self, *args, **kwds):
        cmd = self.client.build_command_line(
            self.client.exe, 'merge', *args, **kwds
        )
        return self.client.printable(cmd)

    def merge_dry_run(self, *args, **kwds):
        k = dict(kwds)
        k['dry_run'] = True
        return parse_merge_status(self.client.capture('merge', *args, **k))

    def safe_merge(self, *args, **kwds):
        """
        Runs the merge with --dry-run first.  If any path would conflict,
        MergeConflict is raised and the real merge is never issued.
        """
        conflicts = [
            s.path for s in self.merge_dry_run(*args, **kwds)
                if s.is_conflicted
        ]
        if conflicts:
            raise MergeConflict(
                conflicts,
                self.merge_command_line(*args, **kwds),
            )
        return self.client.run('merge', *args, **kwds)

    def merge1(self, start_rev, end_rev, from_uri, to_path='.', extra=None):
        k = dict(extra or {})
        k['r'] = '%s:%s' % (start_rev, end_rev)
        return self.safe_merge(to_uri(from_uri), to_path, **k)

    merge_range = merge1

    def merge_full(self, from_uri, to_path, accept=None):
        return self.merge1(1, 'HEAD', from_uri, to_path, {'accept': accept})

    def merge_branch_to_trunk(self, from_uri, to_path='.'):
        start_rev = self.repo.copied_revision(from_uri)
        end_rev = self.repo.revision(from_uri)
        logger.info(
            'merging %s r%d:%d into %s',
            from_uri, start_rev, end_rev, to_path,
        )
        return self.merge1(start_rev, end_rev, from_uri, to_path)

    def reverse_merge(self, start_rev, end_rev=None, path='.'):
        if end_rev is not None:
            return self.safe_merge(path, path, r='%s:%s' % (end_rev, start_rev))
        else:
            return self.safe_merge(path, path, c='-%s' % start_rev)

# vim:set ts=8 sw=4 sts=4 tw=78 et:
