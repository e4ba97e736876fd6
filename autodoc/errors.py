"""Error types raised by autodoc."""


class AutoDocError(RuntimeError):
    """Base class for unrecoverable autodoc failures."""


class SourceIndexError(AutoDocError):
    """The Source Unit Index could not be read."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read source index {path}: {reason}")
