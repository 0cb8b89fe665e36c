# manifold_ad/errors.py


class AutoDiffError(RuntimeError):
    """Raised when the AD engine is used against its contract."""


class ForeignVariableError(AutoDiffError):
    """
    A Variable was used with a tape that did not create it, or with a tape
    that has been reset since the Variable was created.
    """


class SeedDimensionError(AutoDiffError, ValueError):
    """A seed or direction vector does not match the number of inputs."""
