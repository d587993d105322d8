class StorageError(RuntimeError):
    """Counter file could not be read, parsed or written."""


class ExternalFetchError(RuntimeError):
    """An outbound data source (weather API) was unreachable or returned junk."""
