#===============================================================================
# Imports
#===============================================================================
import os
import logging
import posixpath

from collections import (
    namedtuple,
    OrderedDict,
)

from svnhelper.exe import (
    CommandFailed,
)

from svnhelper.path import (
    to_uri,
    glob_match,
    base_uri_of,
)

from svnhelper.repo import (
    Repository,
)

from svnhelper.wc import (
    WorkingCopy,
    ScratchWorkingCopy,
)

from svnhelper.merge import (
    Merger,
    MergeConflict,
)

from svnhelper.constants import (
    w, # Warnings
    Depth,
    Accept,
    OverwritePolicy,
)

#===============================================================================
# Globals
#===============================================================================
logger = logging.getLogger(__name__)

#===============================================================================
# Exceptions
#===============================================================================
class SourceNotFound(Exception):
    pass

#===============================================================================
# Transactions
#===============================================================================
class SvnFileCopyTransaction(
        namedtuple('SvnFileCopyTransaction', 'from_base to_base file')):
    """
    Describes "everything under `from_base` matching `file` goes to the same
    place under `to_base`".  `file` is either a literal name or a shell glob;
    `glob_transactions()` resolves it into concrete transactions.
    """
    __slots__ = ()

    def __new__(cls, from_base, to_base, file):
        return super(SvnFileCopyTransaction, cls).__new__(
            cls,
            to_uri(from_base),
            to_uri(to_base),
            file,
        )

    @property
    def source(self):
        return self.from_base.join(self.file)

    @property
    def destination(self):
        return self.to_base.join(self.file)

    def glob_transactions(self, repo, recursive=False):
        return [
            SvnFileCopyTransaction(self.from_base, self.to_base, f)
                for f in repo.list_files(self.from_base, recursive)
                    if glob_match(self.file, f)
        ]

    def from_exists(self, repo):
        return repo.file_exists(self.source)

    def to_exists(self, repo):
        return repo.file_exists(self.destination)

    def relative_from_base(self, base):
        return self.from_base.relative_path_from(base)

    def relative_to_base(self, base):
        return self.to_base.relative_path_from(base)

    def relative_from(self, base):
        return posixpath.normpath(
            posixpath.join(self.relative_from_base(base), self.file)
        )

    def relative_to(self, base):
        return posixpath.normpath(
            posixpath.join(self.relative_to_base(base), self.file)
        )

#===============================================================================
# Engine
#===============================================================================
class TransactionEngine(object):
    """
    Applies file copy transactions as single commits.  Files that don't
    exist at the destination are copied (so history is kept); files that do
    are merged.  When a merge can't be applied the `policy` decides whether
    the source is exported over the destination or the failure propagates.
    """
    def __init__(self, client, repo=None, policy=OverwritePolicy.Export,
                 accept=Accept.TheirsFull, recursive=False,
                 new_directory_depth=Depth.Empty, scratch_dir=None,
                 scratch_dir_prefix='svnhelper-'):
        assert policy in OverwritePolicy
        self.client = client
        self.repo = repo or Repository(client)
        self.wc = WorkingCopy(client, self.repo)
        self.merger = Merger(client, self.repo)
        self.policy = policy
        self.accept = accept
        self.recursive = recursive
        self.new_directory_depth = new_directory_depth
        self.scratch_dir = scratch_dir
        self.scratch_dir_prefix = scratch_dir_prefix

    @classmethod
    def from_config(cls, conf, client, repo=None):
        return cls(
            client,
            repo=repo or Repository(client, conf.use_listing_cache),
            policy=conf.merge_failure_policy,
            accept=conf.merge_accept,
            recursive=conf.recursive_glob,
            new_directory_depth=conf.new_directory_depth,
            scratch_dir=conf.scratch_dir,
            scratch_dir_prefix=conf.scratch_dir_prefix,
        )

    def scratch(self):
        return ScratchWorkingCopy(
            prefix=self.scratch_dir_prefix,
            dir=self.scratch_dir,
        )

    def expand(self, transaction):
        try:
            transactions = transaction.glob_transactions(
                self.repo,
                self.recursive,
            )
        except CommandFailed as e:
            if not e.is_not_found:
                raise
            transactions = []
        if not transactions:
            raise SourceNotFound(
                "no files matching '%s' found under %s" % (
                    transaction.file,
                    transaction.from_base,
                )
            )
        return transactions

    def destination_files(self, to_base):
        """
        Returns the names of the files under `to_base`, or None if `to_base`
        doesn't exist yet.
        """
        try:
            return set(self.repo.list_files(to_base, self.recursive))
        except CommandFailed as e:
            if e.is_not_found:
                return None
            raise

    def existing_ancestor(self, uri, base):
        """
        Returns the deepest directory between `base` and `uri` (both
        inclusive) that already exists in the repository.  `base` is assumed
        to exist.
        """
        uri = to_uri(uri)
        assert uri.is_within(base)
        while uri != base and not self.repo.exists(uri):
            uri = uri.parent
        return uri

    def check_exists(self, transaction, raise_if_from_not_found=True):
        if transaction.from_exists(self.repo):
            return
        if not raise_if_from_not_found:
            return
        if transaction.to_exists(self.repo):
            logger.warning(w.OnlyAtDestination, transaction.file)
            return
        raise SourceNotFound("file '%s' not found" % transaction.file)

    def merge_or_overwrite(self, source, target):
        try:
            self.merger.merge_full(source, target, accept=self.accept)
        except (MergeConflict, CommandFailed) as e:
            if self.policy == OverwritePolicy.Fail:
                raise
            # Auth, network and lock failures aren't merge problems.
            if isinstance(e, CommandFailed) and not e.is_unmergeable:
                raise
            logger.warning(w.MergeHistoryDiscarded, source, target, e)
            self.wc.export(source, target, force=True)
            self.wc.add(target, force=True)

    def _local(self, scratch, relative):
        if not relative or relative == '.':
            return scratch.path
        return scratch.join(*relative.split('/'))

    def _pull_in_directory(self, scratch, base, relative_dir):
        # Only directories the repository already has are updated into the
        # sparse checkout; `svn copy --parents` adds the missing ones.
        if not relative_dir:
            return
        anchor = self.existing_ancestor(base.join(relative_dir), base)
        if anchor == base:
            return
        self.wc.update_deep(
            self._local(scratch, anchor.relative_path_from(base)),
            depth=self.new_directory_depth,
            update_existing=False,
        )

    def _merge_existing(self, scratch, base, t):
        relative = t.relative_to(base)
        target = self._local(scratch, relative)
        if posixpath.dirname(relative):
            self.wc.update_deep(
                os.path.dirname(target),
                depth=self.new_directory_depth,
                update_existing=False,
            )
        self.wc.update(target, Depth.Infinity)
        self.merge_or_overwrite(t.source, target)

    def _copy_new(self, transactions, scratch, base):
        by_dir = OrderedDict()
        for t in transactions:
            d = posixpath.dirname(t.relative_to(base))
            by_dir.setdefault(d, []).append(t)

        for (d, group) in by_dir.items():
            self._pull_in_directory(scratch, base, d)
            if len(group) == 1:
                target = self._local(scratch, group[0].relative_to(base))
            else:
                target = self._local(scratch, d)
            self.wc.copy([ t.source for t in group ], target)

    def copy_single(self, transaction, message):
        with self.repo.cached_listings():
            transactions = self.expand(transaction)
            existing_files = self.destination_files(transaction.to_base)

        if existing_files is None:
            # Nothing to check out at the destination yet; work from the
            # deepest directory it shares with the source.
            existing_files = set()
            base = base_uri_of([ transaction.from_base, transaction.to_base ])
        else:
            base = transaction.to_base

        existing = [ t for t in transactions if t.file in existing_files ]
        new = [ t for t in transactions if t.file not in existing_files ]

        if not existing and all('/' not in t.file for t in new):
            if len(new) == 1:
                destination = new[0].destination
            else:
                destination = transaction.to_base
            return self.wc.copy(
                [ t.source for t in new ],
                destination,
                message=message,
            )

        with self.scratch() as scratch, self.repo.cached_listings():
            self.wc.checkout(base, scratch.path, Depth.Empty)
            if new:
                self._copy_new(new, scratch, base)
            for t in existing:
                self._merge_existing(scratch, base, t)
            return self.wc.commit(message, scratch.path)

    def copy_multi(self, transactions, message):
        """
        Applies transactions whose bases may live anywhere in the repository
        as one commit.  Every source is resolved before the scratch checkout
        is created, so a missing source never leaves a partial change.
        """
        transactions = list(transactions)
        assert transactions

        with self.repo.cached_listings():
            plan = []
            for transaction in transactions:
                plan += self.expand(transaction)
            existing = set(t for t in plan if t.to_exists(self.repo))

        base = base_uri_of(
            [ t.from_base for t in transactions ] +
            [ t.to_base for t in transactions ]
        )
        logger.debug('common base for %d transactions: %s', len(plan), base)

        with self.scratch() as scratch, self.repo.cached_listings():
            self.wc.checkout(base, scratch.path, Depth.Empty)
            for t in plan:
                if t in existing:
                    self._merge_existing(scratch, base, t)
                else:
                    relative = t.relative_to(base)
                    self._pull_in_directory(
                        scratch,
                        base,
                        posixpath.dirname(relative),
                    )
                    self.wc.copy([ t.source ], self._local(scratch, relative))
            return self.wc.commit(message, scratch.path)

# vim:set ts=8 sw=4 sts=4 tw=78 et:
