"""Errors raised while processing downloads."""


class DownloadAbortError(Exception):
    """The server reported risk control; all downloads should stop."""

    def __init__(self, message: str = "Request too frequently") -> None:
        super().__init__(message)


class ProcessPageError(Exception):
    """At least one page of a video did not reach a final state."""

    def __init__(self, message: str = "Process page error") -> None:
        super().__init__(message)