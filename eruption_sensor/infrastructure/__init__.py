"""PyGObject implementations of the focus sources and the pipe opener.

Modules are imported directly so that only the typelibs actually used are
required.
"""
