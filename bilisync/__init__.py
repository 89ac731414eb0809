"""Download status, safe file names, NFO metadata, a SQLite state store and a downloader for syncing bilibili videos."""

__version__ = "2.1.2"