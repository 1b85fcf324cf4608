"""Exception types raised by PathForge."""


class PathForgeError(Exception):
    """Base class for all PathForge errors."""
    pass


class ConfigurationError(PathForgeError, ValueError):
    """Invalid scene, camera or render configuration.

    Raised at construction time, before any rendering starts.
    """
    pass


class SceneParseError(ConfigurationError):
    """Error during scene file parsing."""
    pass


class SamplingError(PathForgeError, ArithmeticError):
    """A rejection sampler failed to accept a sample.

    Only happens if the random generator is broken.
    """
    pass


class RenderCancelled(PathForgeError):
    """The render was cancelled before all scanlines finished."""
    pass
