#===============================================================================
# Imports
#===============================================================================
import os
import sys
import logging
import logging.handlers

from configparser import (
    RawConfigParser,
)

from svnhelper.util import (
    file_exists_and_not_empty,
)

from svnhelper.path import (
    join_path,
)

from svnhelper.constants import (
    Depth,
    Accept,
    OverwritePolicy,
)

#===============================================================================
# Globals
#===============================================================================
CONFIG = None

#===============================================================================
# Exceptions
#===============================================================================
class ConfigError(Exception):
    pass

class NoConfigObjectCreated(Exception):
    pass

#===============================================================================
# Helpers
#===============================================================================
def get_config():
    global CONFIG
    if not CONFIG:
        raise NoConfigObjectCreated()
    return CONFIG

def get_or_create_config():
    global CONFIG
    if not CONFIG:
        CONFIG = Config()
        CONFIG.load()
    return CONFIG

def clear_config_if_already_created():
    global CONFIG
    if CONFIG:
        CONFIG = None

#===============================================================================
# Classes
#===============================================================================
class Config(RawConfigParser):
    def __init__(self):
        RawConfigParser.__init__(self)
        self._filename = None
        self.__load_defaults()
        self.__validate()

    @property
    def possible_conf_filenames(self):
        return [
            f for f in (
                os.path.expanduser('~/.svnhelperrc'),
                join_path(sys.exec_prefix, 'etc', 'svnhelper.conf'),
                '/etc/svnhelper.conf',
                '/usr/local/etc/svnhelper.conf',
                os.environ.get('SVNHELPER_CONF') or None,
                self._filename or None,
            ) if f
        ]

    @property
    def actual_conf_filenames(self):
        return [
            f for f in (
                file_exists_and_not_empty(f)
                    for f in self.possible_conf_filenames
            ) if f
        ]

    def load(self, filename=None):
        self._filename = filename
        self.read(self.actual_conf_filenames)
        self.__validate()

    def __load_defaults(self):
        logfmt = "%(asctime)s:%(name)s:%(levelname)s:%(message)s"

        self.add_section('main')
        self.set('main', 'svn', 'svn')
        self.set('main', 'username', '')
        self.set('main', 'password', '')
        self.set('main', 'non-interactive', 'yes')
        self.set('main', 'merge-failure-policy', OverwritePolicy.Export)
        self.set('main', 'merge-accept', Accept.TheirsFull)
        self.set('main', 'new-directory-depth', Depth.Empty)
        self.set('main', 'recursive-glob', 'no')
        self.set('main', 'scratch-dir', '')
        self.set('main', 'scratch-dir-prefix', 'svnhelper-')
        self.set('main', 'use-listing-cache', 'yes')

        self.add_section('logging')
        self.set('logging', 'level', 'WARNING')
        self.set('logging', 'format', logfmt)
        self.set('logging', 'filename', '')
        self.set('logging', 'max-mb', '10')
        self.set('logging', 'backup-count', '5')

    def __validate(self):
        dummy = self.merge_failure_policy
        dummy = self.merge_accept
        dummy = self.new_directory_depth
        dummy = self.log_level

    def _g(self, name):
        return self.get('main', name)

    def _b(self, name):
        return self.getboolean('main', name)

    @property
    def svn(self):
        return self._g('svn')

    @property
    def username(self):
        return self._g('username')

    @property
    def password(self):
        return self._g('password')

    @property
    def non_interactive(self):
        return self._b('non-interactive')

    @property
    def merge_failure_policy(self):
        policy = self._g('merge-failure-policy')
        if policy not in OverwritePolicy:
            raise ConfigError(
                "invalid merge-failure-policy '%s' (expected one of: %s)" % (
                    policy, ', '.join(sorted(OverwritePolicy.keys()))
                )
            )
        return policy

    @property
    def merge_accept(self):
        accept = self._g('merge-accept')
        if accept not in Accept:
            raise ConfigError("invalid merge-accept '%s'" % accept)
        return accept

    @property
    def new_directory_depth(self):
        depth = self._g('new-directory-depth')
        if depth not in Depth:
            raise ConfigError("invalid new-directory-depth '%s'" % depth)
        return depth

    @property
    def recursive_glob(self):
        return self._b('recursive-glob')

    @property
    def scratch_dir(self):
        d = self._g('scratch-dir')
        return os.path.expanduser(d) if d else None

    @property
    def scratch_dir_prefix(self):
        return self._g('scratch-dir-prefix')

    @property
    def use_listing_cache(self):
        return self._b('use-listing-cache')

    @property
    def log_level(self):
        level = self.get('logging', 'level').upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigError("invalid logging level '%s'" % level)
        return level

    @property
    def log_format(self):
        return self.get('logging', 'format')

    @property
    def log_filename(self):
        f = self.get('logging', 'filename')
        return os.path.expanduser(f) if f else None

    @property
    def log_max_bytes(self):
        return int(self.get('logging', 'max-mb')) * 1024 * 1024

    @property
    def log_backup_count(self):
        return int(self.get('logging', 'backup-count'))

    def configure_logging(self, verbose=False, stream=None):
        """
        Attach a handler to the 'svnhelper' logger based on the [logging]
        section.  A rotating file handler is used when a filename has been
        configured, otherwise messages go to `stream` (stderr by default).
        """
        l = logging.getLogger('svnhelper')
        l.setLevel(logging.DEBUG if verbose else self.log_level)
        for h in list(l.handlers):
            l.removeHandler(h)

        fn = self.log_filename
        if fn:
            k = dict(
                maxBytes=self.log_max_bytes,
                backupCount=self.log_backup_count,
            )
            h = logging.handlers.RotatingFileHandler(fn, **k)
        else:
            h = logging.StreamHandler(stream or sys.stderr)

        h.setFormatter(logging.Formatter(self.log_format))
        l.addHandler(h)
        return l

# vim:set ts=8 sw=4 sts=4 tw=78 et:
