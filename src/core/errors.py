"""
Exceptions raised across the netdiag core.

A streamed engine failure is not an exception: it arrives as an
UpdateKind.ERROR update and ends the run like any other terminal update.
"""


class NetDiagError(Exception):
    """Base class for netdiag errors."""


class StartFailure(NetDiagError):
    """The engine could not be reached or refused to begin a run."""


class ChannelClosed(NetDiagError):
    """The update channel no longer accepts publishers or subscribers."""


class ExportError(NetDiagError):
    """Copy or save of the output buffer failed. Always recoverable."""


class ClipboardError(ExportError):
    """No usable clipboard, or the clipboard command failed."""


class PersistError(ExportError):
    """The report could not be written to the chosen destination."""
