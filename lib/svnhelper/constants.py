#===============================================================================
# Imports
#===============================================================================
from svnhelper.util import (
    Constant,
)

#===============================================================================
# Subversion Option Values
#===============================================================================
class _Depth(Constant):
    Empty = 'empty'
    Files = 'files'
    Immediates = 'immediates'
    Infinity = 'infinity'

Depth = _Depth()

class _Accept(Constant):
    Postpone = 'postpone'
    Base = 'base'
    MineFull = 'mine-full'
    TheirsFull = 'theirs-full'
    MineConflict = 'mine-conflict'
    TheirsConflict = 'theirs-conflict'

Accept = _Accept()

class _OverwritePolicy(Constant):
    # Export the source over the destination when a merge can't be applied.
    Export = 'export'
    # Let the merge failure propagate.
    Fail = 'fail'

OverwritePolicy = _OverwritePolicy()

#===============================================================================
# Merge Status Columns
#===============================================================================
# svn merge/update notification lines are laid out as four fixed-width
# status columns followed by a single space and the path:
#
#   column 0: text status      (A, D, U, C, G, E, R)
#   column 1: property status  (U, C, G)
#   column 2: lock status      (B)
#   column 3: tree conflict    (C)
#   column 4: ' '
#   column 5: start of path
STATUS_CODE_WIDTH = 4
STATUS_PATH_OFFSET = 5
STATUS_CODE_CHARS = ' ADUCGERBM'
CONFLICT_MARKER = 'C'

#===============================================================================
# Warnings
#===============================================================================
class _Warnings(Constant):
    NoChange = 'no change: %s'
    OnlyAtDestination = "file '%s' only exists at the destination"
    MergeHistoryDiscarded = (
        "merging '%s' into '%s' failed (%s); overwriting with the exported "
        "source, merge history for this file is discarded"
    )

w = _Warnings()

# vim:set ts=8 sw=4 sts=4 tw=78 et:
