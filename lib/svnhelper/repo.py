#===============================================================================
# Imports
#===============================================================================
import logging

from collections import (
    namedtuple,
)

from datetime import (
    datetime,
    timezone,
)

from xml.etree import (
    ElementTree,
)

from svnhelper.exe import (
    CommandFailed,
)

from svnhelper.path import (
    to_uri,
    glob_match,
)

#===============================================================================
# Globals
#===============================================================================
logger = logging.getLogger(__name__)

SVN_DATE_FORMATS = (
    '%Y-%m-%dT%H:%M:%S.%fZ',
    '%Y-%m-%dT%H:%M:%SZ',
)

#===============================================================================
# Exceptions
#===============================================================================
class RepositoryError(Exception):
    pass

#===============================================================================
# Records
#===============================================================================
class ListEntry(namedtuple('ListEntry', 'kind path revision author date')):
    __slots__ = ()

    @property
    def is_dir(self):
        return self.kind == 'dir'

    @property
    def is_file(self):
        return self.kind == 'file'

    @property
    def name(self):
        return self.path + '/' if self.is_dir else self.path

class LogEntry(namedtuple('LogEntry', 'revision author date message')):
    __slots__ = ()

class DiffEntry(namedtuple('DiffEntry', 'kind item props path')):
    __slots__ = ()

#===============================================================================
# Parsers
#===============================================================================
def parse_svn_date(text):
    """
    >>> parse_svn_date('2016-03-01T12:34:56.123456Z')
    datetime.datetime(2016, 3, 1, 12, 34, 56, 123456, tzinfo=datetime.timezone.utc)
    >>> parse_svn_date('') is None
    True
    """
    if not text:
        return None
    text = text.strip()
    for fmt in SVN_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    raise ValueError("unrecognised svn date: '%s'" % text)

def _text(element, tag):
    child = element.find(tag)
    if child is None or child.text is None:
        return ''
    return child.text

def _is_xml(output):
    s = output.lstrip()
    return s.startswith('<?xml') or s.startswith('<')

def parse_list_xml(output):
    entries = []
    root = ElementTree.fromstring(output)
    for entry in root.iter('entry'):
        commit = entry.find('commit')
        revision = None
        author = ''
        date = None
        if commit is not None:
            revision = int(commit.get('revision'))
            author = _text(commit, 'author')
            date = parse_svn_date(_text(commit, 'date'))
        entries.append(
            ListEntry(
                kind=entry.get('kind'),
                path=_text(entry, 'name'),
                revision=revision,
                author=author,
                date=date,
            )
        )
    return entries

def parse_list_text(output):
    """
    >>> parse_list_text('a.txt\\nsub/\\n\\n')
    [ListEntry(kind='file', path='a.txt', revision=None, author='', date=None), ListEntry(kind='dir', path='sub', revision=None, author='', date=None)]
    """
    entries = []
    for line in output.splitlines():
        if not line:
            continue
        if line.endswith('/'):
            entries.append(ListEntry('dir', line[:-1], None, '', None))
        else:
            entries.append(ListEntry('file', line, None, '', None))
    return entries

def parse_list_output(output):
    if not output.strip():
        return []
    if _is_xml(output):
        return parse_list_xml(output)
    return parse_list_text(output)

def parse_log_xml(output):
    """
    Parses `svn log --xml` output.  svn reports newest first; the returned
    list is oldest first.
    """
    if not output.strip():
        return []
    entries = []
    root = ElementTree.fromstring(output)
    for entry in root.iter('logentry'):
        entries.append(
            LogEntry(
                revision=int(entry.get('revision')),
                author=_text(entry, 'author'),
                date=parse_svn_date(_text(entry, 'date')),
                message=_text(entry, 'msg'),
            )
        )
    entries.reverse()
    return entries

def parse_info(output):
    """
    >>> info = parse_info('Path: .\\nWorking Copy Root Path: /tmp/wc\\nURL: file:///r\\n')
    >>> info['Working Copy Root Path']
    '/tmp/wc'
    >>> info['URL']
    'file:///r'
    """
    info = {}
    for line in output.splitlines():
        if ': ' not in line:
            continue
        (key, value) = line.split(': ', 1)
        info[key.strip()] = value.strip()
    return info

def parse_diff_summary_xml(output):
    if not output.strip():
        return []
    entries = []
    root = ElementTree.fromstring(output)
    for path in root.iter('path'):
        entries.append(
            DiffEntry(
                kind=path.get('kind'),
                item=path.get('item'),
                props=path.get('props'),
                path=(path.text or '').strip(),
            )
        )
    return entries

#===============================================================================
# Listing Cache
#===============================================================================
class ListingCache(object):
    """
    Memoizes `Repository.list` results keyed by (uri, recursive) for the
    duration of a `with` block.  Entering attaches the cache to the
    repository; leaving clears it and detaches it.  Entering while another
    cache is attached reuses the outer one.
    """
    def __init__(self, repo):
        self.repo = repo
        self.entries = {}
        self.hits = 0
        self.misses = 0
        self.owner = False

    def __enter__(self):
        if self.repo.listing_cache is None:
            self.repo.listing_cache = self
            self.owner = True
        return self.repo.listing_cache

    def __exit__(self, *exc_info):
        if self.owner:
            self.clear()
            self.repo.listing_cache = None
            self.owner = False

    def __len__(self):
        return len(self.entries)

    def __contains__(self, key):
        return key in self.entries

    def get(self, key):
        if key in self.entries:
            self.hits += 1
            return self.entries[key]
        self.misses += 1

    def put(self, key, entries):
        self.entries[key] = entries

    def clear(self):
        self.entries.clear()

#===============================================================================
# Repository
#===============================================================================
class Repository(object):
    def __init__(self, client, use_listing_cache=True):
        self.client = client
        self.use_listing_cache = use_listing_cache
        self.listing_cache = None

    def cached_listings(self):
        if not self.use_listing_cache:
            return _NullCache()
        return ListingCache(self)

    def invalidate_listings(self):
        if self.listing_cache is not None:
            self.listing_cache.clear()

    def list(self, uri, recursive=False):
        uri = to_uri(uri)
        key = (str(uri), bool(recursive))
        cache = self.listing_cache
        if cache is not None:
            entries = cache.get(key)
            if entries is not None:
                logger.debug('listing cache hit: %s', uri)
                return entries

        k = dict(xml=True)
        if recursive:
            k['R'] = True
        entries = parse_list_output(self.client.capture('list', uri, **k))

        if cache is not None:
            cache.put(key, entries)
        return entries

    def list_recursive(self, uri):
        return self.list(uri, recursive=True)

    def list_files(self, uri, recursive=False):
        return [ e.path for e in self.list(uri, recursive) if e.is_file ]

    def list_files_recursive(self, uri):
        return self.list_files(uri, recursive=True)

    def _parent_entries(self, uri):
        uri = to_uri(uri)
        try:
            return (uri.name, self.list(uri.parent))
        except CommandFailed as e:
            if e.is_not_found:
                return (uri.name, [])
            raise

    def exists(self, uri):
        (name, entries) = self._parent_entries(uri)
        return any(glob_match(name, e.path) for e in entries)

    def file_exists(self, uri):
        (name, entries) = self._parent_entries(uri)
        return any(glob_match(name, e.path) for e in entries if e.is_file)

    def info(self, path='.'):
        return parse_info(self.client.capture('info', path))

    def working_copy_root_path(self, path='.'):
        info = self.info(path)
        try:
            return info['Working Copy Root Path']
        except KeyError:
            raise RepositoryError("'%s' is not a working copy" % path)

    def url(self, path='.'):
        return to_uri(self.info(path)['URL'])

    def log(self, uri, limit=None, stop_on_copy=False):
        k = dict(xml=True)
        if limit:
            k['l'] = int(limit)
        if stop_on_copy:
            k['stop_on_copy'] = True
        return parse_log_xml(self.client.capture('log', to_uri(uri), **k))

    def revision(self, uri):
        entries = self.log(uri, limit=1)
        if not entries:
            raise RepositoryError("no log entries found for '%s'" % uri)
        return entries[-1].revision

    def copied_revision(self, uri):
        entries = self.log(uri, stop_on_copy=True)
        if not entries:
            raise RepositoryError("no log entries found for '%s'" % uri)
        return entries[0].revision

    def cat(self, uri):
        return self.client.capture('cat', to_uri(uri))

    def diff(self, old, new=None):
        args = [ to_uri(old) ]
        if new is not None:
            args.append(to_uri(new))
        return self.client.capture('diff', *args)

    def diff_summary(self, old, new):
        output = self.client.capture(
            'diff',
            to_uri(old),
            to_uri(new),
            summarize=True,
            xml=True,
        )
        return parse_diff_summary_xml(output)

    def status(self, path='.'):
        return self.client.capture('status', path)

class _NullCache(object):
    def __enter__(self):
        return None

    def __exit__(self, *exc_info):
        pass

# vim:set ts=8 sw=4 sts=4 tw=78 et:
