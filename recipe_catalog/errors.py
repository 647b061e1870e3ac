"""Exceptions raised by the import pipeline and the recipe store."""


class CatalogError(Exception):
    """Base class for every catalog failure."""


class PathError(CatalogError):
    """An import file candidate cannot be used."""


class PathNotFoundError(PathError):
    pass


class NotAFileError(PathError):
    pass


class NotReadableError(PathError):
    pass


class InvalidJsonError(CatalogError):
    """The dump is not parseable JSON."""


class UnrecognizedFormatError(CatalogError):
    """The root JSON value has no supported container shape."""


class RecordPersistError(CatalogError):
    """A single normalized recipe could not be written."""


class StoreUnavailableError(CatalogError):
    """The SQLite database cannot be opened or queried."""
