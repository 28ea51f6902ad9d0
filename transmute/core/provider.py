import inspect
import logging
import logging.config
import typing as t

from .config import TransmutationSettings

TRACE: t.Final = 5


class TraceLogger(logging.Logger):
    """Logger with a ``trace()`` method for the TRACE level, below DEBUG."""

    def trace(self, msg: str, *args: t.Any, **kwargs: t.Any) -> None:
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)


class LoggingProvider(object):
    """Configures stdlib logging from the ``logging`` settings section."""

    Function: t.Final[t.Literal["fn"]] = "fn"
    Module: t.Final[t.Literal["mod"]] = "mod"

    def __init__(self, config: dict[str, t.Any], debug: bool):
        logging.addLevelName(TRACE, "TRACE")
        logging.setLoggerClass(TraceLogger)
        logging.config.dictConfig(config)
        self.capture_warnings(debug)

    @classmethod
    def get_logger(cls, scope: t.Literal["mod", "fn"] = "mod", name: str | None = None) -> TraceLogger:
        """Return the logger named ``name``, or one named after the calling module or function."""
        if name is None:
            caller = inspect.stack()[1]
            name = caller.frame.f_globals["__name__"]
            if scope == cls.Function:
                name = f"{name}.{caller.function}"
        return t.cast(TraceLogger, logging.getLogger(name))

    @staticmethod
    def capture_warnings(capture: bool) -> None:
        logging.captureWarnings(capture)


class ConfigProvider(object):
    """Serve transmutation parameters from booted settings by name."""

    def __init__(self, config: TransmutationSettings):
        self.config = config

    def get_config(self, name: str) -> t.Any | None:
        return getattr(self.config, name, None)
