__version__ = '0.1'

# vim:set ts=8 sw=4 sts=4 tw=78 et:
