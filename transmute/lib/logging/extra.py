import json
import logging
import sys
import textwrap
import typing as t

import pydantic_core
import pygments
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]

# attributes every LogRecord carries, plus those added while formatting
RecordAttributes: t.Final = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "asctime",
    "message",
    "log_color",
}


class ExtraFormatter(logging.Formatter):
    """Append the ``extra={...}`` fields of a record to the message as JSON.

    ``base`` is the formatter class that renders the record itself, usually
    ``colorlog.ColoredFormatter``; any unknown keyword arguments are passed to
    it. The JSON is highlighted with pygments when stderr is a terminal.
    """

    def __init__(
        self,
        base: type[logging.Formatter],
        format: str | None = None,
        datefmt: str | None = None,
        indent: bool | None = True,
        pyg_style: str = "monokai",
        style: t.Literal["%", "{", "$"] = "%",
        validate: bool = True,
        *,
        defaults: t.Any = None,
        **kwargs: t.Any,
    ):
        self.base = base(format, datefmt=datefmt, style=style, validate=validate, defaults=defaults, **kwargs)
        self.indent = indent
        self.pyg_style = pyg_style
        self.no_color = bool(kwargs.get("no_color", False))

    def format(self, record: logging.LogRecord) -> str:
        message = self.base.format(record)
        extra = {k: v for k, v in record.__dict__.items() if k not in RecordAttributes}
        if not extra:
            return message

        js = json.dumps(
            pydantic_core.to_jsonable_python(extra, fallback=repr),
            sort_keys=True,
            indent=(4 if self.indent else None),
        )
        if self.indent:
            js = textwrap.indent(js, "  ")
        if sys.stderr.isatty() and not self.no_color:
            js = pygments.highlight(js, JsonLexer(), Terminal256Formatter(style=self.pyg_style))

        sep = "\n" if self.indent else " "
        return f"{message}{sep}{js.rstrip()}"

    def __getattr__(self, name: str) -> t.Any:
        return getattr(self.base, name)
