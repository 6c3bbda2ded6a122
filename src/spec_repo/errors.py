"""Error taxonomy for bundle, split and sync operations.

Filesystem failures are not wrapped: they surface as the builtin OSError
family and propagate to the caller unchanged.
"""


class SpecRepoError(Exception):
    """Base class for every error raised by spec-repo."""


class ParseError(SpecRepoError):
    """Malformed document text."""


class ConflictError(SpecRepoError):
    """An entity is declared both inline and in a fragment directory."""


class DuplicateKeyError(SpecRepoError):
    """Two fragment files decode to the same object key."""


class DanglingSampleError(SpecRepoError):
    """A code sample references an operation that does not exist."""


class DuplicateSampleFieldError(SpecRepoError):
    """An operation carries inline code samples and sample files at once."""


class PluginError(SpecRepoError):
    """A plugin module does not honour the plugin unit contract."""


class RegistryError(SpecRepoError):
    """A child root is mounted under an unknown parent namespace."""
