"""Errors, logging, settings and call helpers shared by every fpkit module."""

import inspect
import logging
import os
from typing import Any, Callable, Mapping, Optional

from models import Settings, Shape


class FPError(Exception):
    """Base class for every error raised by fpkit."""
    pass


class UnsupportedShape(FPError, TypeError):
    """Raised when an operation has no behavior for the operand's shape."""

    def __init__(self, operation: str, shape: Shape, value: Any = None):
        self.operation = operation
        self.shape = shape
        self.value = value
        kind = type(value).__name__
        super().__init__(f"{operation} is not defined for {shape.value} values ({kind})")


class ConfigurationError(FPError, ValueError):
    """Raised when a combinator is configured with invalid parameters."""
    pass


class KeyNotFound(FPError, KeyError):
    """Raised by strict accessors when a key is absent."""

    def __init__(self, key: Any, path: tuple = ()):
        self.key = key
        self.path = path
        super().__init__(key)

    def __str__(self):
        walked = " -> ".join(repr(k) for k in self.path) or "<root>"
        return f"key {self.key!r} not found after {walked}"


_ENV_PREFIX = "FPKIT_"
_TRUTHY = {"1", "true", "yes", "on"}


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from FPKIT_* environment variables"""
    env = os.environ if env is None else env
    values = {}
    if f"{_ENV_PREFIX}LOG_LEVEL" in env:
        values["log_level"] = env[f"{_ENV_PREFIX}LOG_LEVEL"]
    if f"{_ENV_PREFIX}DEFAULT_BATCH_SIZE" in env:
        values["default_batch_size"] = env[f"{_ENV_PREFIX}DEFAULT_BATCH_SIZE"]
    if f"{_ENV_PREFIX}STRICT_GET" in env:
        values["strict_get"] = env[f"{_ENV_PREFIX}STRICT_GET"].strip().lower() in _TRUTHY
    return Settings(**values)


_settings = load_settings()

# Configure logging
logging.basicConfig(level=_settings.numeric_log_level)
logger = logging.getLogger(__name__)


def get_settings() -> Settings:
    return _settings


def configure(**overrides) -> Settings:
    """Replace the active settings; unknown or invalid values raise ValidationError"""
    global _settings
    _settings = Settings(**{**_settings.model_dump(), **overrides})
    logging.getLogger().setLevel(_settings.numeric_log_level)
    logger.debug(f"Settings updated: {_settings.model_dump()}")
    return _settings


def reset_settings() -> Settings:
    """Go back to the environment-derived settings"""
    global _settings
    _settings = load_settings()
    logging.getLogger().setLevel(_settings.numeric_log_level)
    return _settings


def config_error(message: str) -> ConfigurationError:
    """Log and build a ConfigurationError for the caller to raise"""
    logger.warning(f"Invalid combinator configuration: {message}")
    return ConfigurationError(message)


def positional_arity(fn: Callable) -> Optional[int]:
    """
    Number of required positional parameters fn takes, or None when unbounded
    or unknown (builtins without a signature, *args). Parameters with a
    default are not counted.
    """
    try:
        sig = inspect.signature(fn)
    except (ValueError, TypeError):
        return None
    count = 0
    for param in sig.parameters.values():
        if param.kind == param.VAR_POSITIONAL:
            return None
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD) and param.default is param.empty:
            count += 1
    return count


def fit_arity(fn: Callable, available: int) -> Callable:
    """
    Wrap fn so it can always be called with `available` positional arguments,
    passing on only as many required ones as it declares. Callables without a readable
    signature, and classes, get just the first argument.
    """
    if isinstance(fn, type):
        return lambda *args: fn(*args[:1])
    arity = positional_arity(fn)
    if arity is None:
        try:
            inspect.signature(fn)
        except (ValueError, TypeError):
            return lambda *args: fn(*args[:1])
        return fn
    if arity >= available:
        return fn
    if arity == 0:
        return lambda *args: fn()
    return lambda *args: fn(*args[:arity])
