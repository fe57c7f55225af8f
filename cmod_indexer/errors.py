"""Exception types raised by the indexer.

Every error is fatal for a run. Library code raises, only the command line
entry point turns them into a message and an exit status.
"""


class IndexerError(Exception):
    """Base class for all indexer failures."""


class ConfigError(IndexerError):
    """The configuration document or the selected profile is unusable."""


class NoMatchingProfile(IndexerError):
    """No profile pattern matched the input file's base name."""

    def __init__(self, base_name: str, config_path: str | None = None):
        self.base_name = base_name
        self.config_path = config_path
        where = f" in config '{config_path}'" if config_path else ""
        super().__init__(f"No profile matched input '{base_name}'{where}")


class ParseError(IndexerError):
    """A data line could not be split into fields, even permissively."""

    def __init__(self, offset: int, line: str, reason: str, path: str | None = None):
        self.offset = offset
        self.line = line
        self.reason = reason
        self.path = path
        super().__init__(offset, line, reason, path)

    def __str__(self):
        where = f" in '{self.path}'" if self.path else ""
        return f"CSV parse error{where} at input offset {self.offset}: {self.reason}\nLine: {self.line}"


class EmptyInputError(IndexerError):
    """The input has no header line at all."""


class IndexIOError(IndexerError):
    """Opening or closing one of the run's files failed."""
