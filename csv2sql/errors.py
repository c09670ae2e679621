class Csv2SqlError(Exception):
    """Base class for every error that aborts a csv2sql run."""


class ArgumentError(Csv2SqlError):
    """Missing flag value or unrecognised command-line token."""


class DatabaseError(Csv2SqlError):
    """The database file could not be opened."""


class IngestError(Csv2SqlError):
    """Reading a CSV source or loading it into a table failed."""


class QueryError(Csv2SqlError):
    """Reading, running or scanning a query failed."""
