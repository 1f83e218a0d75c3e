#===============================================================================
# Imports
#===============================================================================
import os
import re
import posixpath

from fnmatch import (
    fnmatchcase,
)

#===============================================================================
# Globals
#===============================================================================
URI_PATTERN = re.compile(r'^(?P<scheme>[A-Za-z][A-Za-z0-9+.-]*)://(?P<rest>.*)$')

#===============================================================================
# Classes
#===============================================================================
class Uri(str):
    """
    A repository URI or a local path, normalised so that equal locations
    compare equal as strings.  The scheme and authority (if any) are kept
    verbatim in `prefix`; everything after them is a posix path.

    >>> Uri('file:///tmp/repo/trunk/')
    'file:///tmp/repo/trunk'
    >>> Uri('svn://host//a/./b/../c')
    'svn://host/a/c'
    >>> Uri('svn://host/a/c').prefix
    'svn://host'
    >>> Uri('svn://host/a/c').path
    '/a/c'
    >>> Uri('foo/bar/')
    'foo/bar'
    >>> Uri('svn://host/a/c').join('d', 'e.txt')
    'svn://host/a/c/d/e.txt'
    >>> Uri('svn://host/a/c').parent
    'svn://host/a'
    >>> Uri('svn://host/a/c').name
    'c'
    >>> Uri('svn://host/a').parent.parent
    'svn://host'
    >>> Uri('file:///a').parent
    'file:///'
    >>> Uri('a').parent, Uri('.').parent, Uri('..').parent
    ('.', '..', '../..')
    """
    def __new__(cls, value):
        value = os.fspath(value)
        if not value:
            raise ValueError('empty path')
        (prefix, path) = split_uri(value)
        if prefix:
            path = posixpath.normpath('/' + path.replace('\\', '/'))
            if path.startswith('//'):
                path = path[1:]
            # 'svn://host/' and 'svn://host' name the same root.
            if path == '/' and not prefix.endswith('/'):
                path = ''
        else:
            path = posixpath.normpath(path)
        return str.__new__(cls, prefix + path)

    @property
    def prefix(self):
        return split_uri(self)[0]

    @property
    def path(self):
        return split_uri(self)[1]

    @property
    def is_url(self):
        return bool(self.prefix)

    @property
    def name(self):
        return posixpath.basename(self.path)

    @property
    def parent(self):
        if self.prefix:
            return Uri(self.prefix + posixpath.dirname(self.path))
        path = self.path
        if path == '.' or posixpath.basename(path) == '..':
            return Uri(posixpath.join(path, '..'))
        return Uri(posixpath.dirname(path) or '.')

    def up(self, levels):
        uri = self
        for i in range(levels):
            uri = uri.parent
        return uri

    def join(self, *parts):
        return Uri(posixpath.join(str(self), *parts))

    def relative_path_from(self, base):
        """
        >>> Uri('s://h/a/b/c').relative_path_from('s://h/a/d')
        '../b/c'
        >>> Uri('s://h/a').relative_path_from('s://h/a')
        '.'
        """
        base = to_uri(base)
        if self.prefix != base.prefix:
            raise ValueError(
                "'%s' and '%s' do not share a repository root" % (self, base)
            )
        return posixpath.relpath(self.path, base.path)

    def is_within(self, base):
        """
        >>> Uri('s://h/a/b').is_within('s://h/a')
        True
        >>> Uri('s://h/a').is_within('s://h/a')
        True
        >>> Uri('s://h/ab').is_within('s://h/a')
        False
        """
        try:
            rel = self.relative_path_from(base)
        except ValueError:
            return False
        return count_parent_segments(rel) == 0

#===============================================================================
# Helper Methods
#===============================================================================
def split_uri(value):
    """
    >>> split_uri('file:///tmp/repo')
    ('file://', '/tmp/repo')
    >>> split_uri('svn://host:3690/repo/trunk')
    ('svn://host:3690', '/repo/trunk')
    >>> split_uri('http://host')
    ('http://host', '/')
    >>> split_uri('/tmp/wc')
    ('', '/tmp/wc')
    """
    match = URI_PATTERN.match(value)
    if not match:
        return ('', value)
    scheme = match.group('scheme')
    rest = match.group('rest')
    ix = rest.find('/')
    if ix == -1:
        return ('%s://%s' % (scheme, rest), '/')
    return ('%s://%s' % (scheme, rest[:ix]), rest[ix:])

def to_uri(value):
    if isinstance(value, Uri):
        return value
    return Uri(value)

def count_parent_segments(rel):
    """
    >>> count_parent_segments('../../c/shell')
    2
    >>> count_parent_segments('..')
    1
    >>> count_parent_segments('c/../d')
    0
    """
    count = 0
    for part in rel.split('/'):
        if part != '..':
            break
        count += 1
    return count

def base_uri_of(uris):
    """
    Returns the deepest URI that every URI in `uris` lives under.  Each URI
    is expressed relative to the running base; the leading '..' segments of
    that relative path say how many levels the base has to be widened by.

    >>> base_uri_of([
    ...     's://h/trunk/a/b/master',
    ...     's://h/trunk/a/c/shell',
    ...     's://h/trunk/a/c/shell/master',
    ... ])
    's://h/trunk/a'
    >>> base_uri_of(['s://h/trunk/a'])
    's://h/trunk/a'
    >>> base_uri_of(['s://h/trunk/a/b', 's://h/trunk/a'])
    's://h/trunk/a'
    >>> base_uri_of(['file:///r/x/y/z', 'file:///r/q'])
    'file:///r'
    >>> base_uri_of(['a', 'b']), base_uri_of(['x/a/b', 'x/c'])
    ('.', 'x')
    >>> base_uri_of(['s://h/a', 't://h/a'])
    Traceback (most recent call last):
        ...
    ValueError: 't://h/a' and 's://h/a' do not share a repository root
    """
    uris = [ to_uri(u) for u in uris ]
    if not uris:
        raise ValueError('no URIs given')
    base = uris[0]
    for uri in uris[1:]:
        levels = count_parent_segments(uri.relative_path_from(base))
        if levels:
            base = base.up(levels)
    return base

def ancestor_chain(root, path):
    """
    Returns the list of local directories from `root` down to `path`, both
    inclusive.

    >>> ancestor_chain('/wc', '/wc/a/b')
    ['/wc', '/wc/a', '/wc/a/b']
    >>> ancestor_chain('/wc', '/wc')
    ['/wc']
    >>> ancestor_chain('/wc', '/other')
    Traceback (most recent call last):
        ...
    ValueError: '/other' is not inside working copy '/wc'
    """
    rel = os.path.relpath(path, root)
    if rel == os.curdir:
        return [ root ]
    if rel.split(os.sep)[0] == os.pardir:
        raise ValueError("'%s' is not inside working copy '%s'" % (path, root))
    chain = [ root ]
    for part in rel.split(os.sep):
        chain.append(os.path.join(chain[-1], part))
    return chain

def glob_match(pattern, name):
    """
    >>> glob_match('*.txt', 'a.txt')
    True
    >>> glob_match('a.txt', 'a.txt')
    True
    >>> glob_match('*.txt', 'a.TXT')
    False

    As in the shell, a leading '.' is only matched by a literal '.':

    >>> glob_match('*', '.hidden'), glob_match('.*', '.hidden')
    (False, True)
    >>> glob_match('?svnignore', '.svnignore')
    False
    """
    if name.startswith('.') and not pattern.startswith('.'):
        return False
    return fnmatchcase(name, pattern)

def join_path(*args):
    return os.path.abspath(os.path.normpath(os.path.join(*args)))

# vim:set ts=8 sw=4 sts=4 tw=78 et:
