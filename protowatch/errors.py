"""Error types raised by protowatch components."""


class ProtoWatchError(RuntimeError):
    """Base class for recoverable and fatal protowatch failures."""


class ConfigError(ProtoWatchError):
    """Raised when the configuration file is missing, malformed, or points at missing folders."""


class ExtractionError(ProtoWatchError):
    """Raised when a Go source file cannot be read or parsed."""


class EmitError(ProtoWatchError):
    """Raised when a schema document cannot be written."""


__all__ = ["ProtoWatchError", "ConfigError", "ExtractionError", "EmitError"]
