class ArchiveException(Exception):
    """Raised when model parameters cannot be restored from an archive."""


class UnknownModelParametersException(ArchiveException): ...


class ArchiveVersionException(ArchiveException): ...
