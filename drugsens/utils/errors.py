# drugsens/utils/errors.py
"""
Error taxonomy.

ConfigurationError  fatal, raised before any fitting
InputError          fatal at the step boundary (missing file / artifact, empty data)

Unseen categories at apply-time are NOT errors: they follow the encoder's
fallback policy and are only logged / counted.
"""


class DrugSensError(RuntimeError):
    """Base class for every error raised by this package."""


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------
class ConfigurationError(DrugSensError):
    """Invalid user-provided configuration. Should NOT print traceback."""


class InvalidRatio(ConfigurationError):
    pass


class UnknownStrategy(ConfigurationError):
    pass


class ColumnTierConflict(ConfigurationError):
    pass


class MissingColumnError(ConfigurationError):
    pass


# -----------------------------------------------------------------------------
# Input
# -----------------------------------------------------------------------------
class InputError(DrugSensError):
    pass


class EmptyDataset(InputError):
    pass


class MissingArtifactError(InputError):
    """
    A step's declared upstream artifact does not exist.
    The message always names the step that has to run first.
    """

    def __init__(self, path, upstream_step: str):
        self.path = path
        self.upstream_step = upstream_step
        super().__init__(
            f"Required artifact not found: {path}. "
            f"Please run the '{upstream_step}' step first."
        )
