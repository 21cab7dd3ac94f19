"""Errors raised when a kdig corpus cannot produce a summary."""


class KdigStatsError(Exception):
    """Base class for corpus-level failures."""


class InputDirectoryError(KdigStatsError):
    """The input path is missing or is not a directory."""


class NoInputFilesError(KdigStatsError):
    """No candidate files matched the extension and filename filter."""


class NoValidRecordsError(KdigStatsError):
    """Candidate files were found but none held usable kdig output."""
