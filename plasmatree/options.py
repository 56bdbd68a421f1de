"""Command-line and configuration-file option parsing for the tools."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import numpy as np

_MISSING = object()
_TRUE_WORDS = {"", "1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


class OptionError(Exception):
    """Raised when the supplied options are invalid or incomplete."""


def parse_vector(text: str) -> np.ndarray:
    """Parse a vector written as ``(x,y,z)`` with any number of components."""
    if len(text) < 2 or not text.startswith("(") or not text.endswith(")"):
        raise ValueError(f"vector must be written as '(x,y,...)', got {text!r}")
    try:
        values = [float(part) for part in text[1:-1].split(",")]
    except ValueError:
        raise ValueError(f"invalid vector component in {text!r}") from None
    return np.array(values, dtype=float)


def _looks_like_option(token: str) -> bool:
    if not token.startswith("-") or len(token) < 2:
        return False
    try:
        float(token)
    except ValueError:
        return True
    return False


@dataclass
class _Option:
    name: str
    short: str | None
    help: str
    convert: Callable[[str], Any] | None
    default: Any = _MISSING
    required: bool = False
    multiple: bool = False

    @property
    def takes_value(self) -> bool:
        return self.convert is not None

    def convert_value(self, raw: str) -> Any:
        assert self.convert is not None
        try:
            return self.convert(raw)
        except ValueError:
            raise OptionError(
                f"the argument ('{raw}') for option '--{self.name}' is invalid"
            ) from None

    def usage_line(self) -> str:
        names = f"-{self.short} [ --{self.name} ]" if self.short else f"--{self.name}"
        if self.takes_value:
            names += " arg"
        if self.default is not _MISSING:
            names += f" (={self.default})"
        return f"  {names:<38} {self.help}".rstrip()


class _OptionGroup:
    """A titled section of options; ``add`` returns the group for chaining."""

    def __init__(self, title: str, parser: OptionParser) -> None:
        self.title = title
        self._parser = parser
        self.options: list[_Option] = []

    def add(
        self,
        spec: str,
        convert: Callable[[str], Any] | None = None,
        help: str = "",
        *,
        default: Any = _MISSING,
        required: bool = False,
        multiple: bool = False,
    ) -> _OptionGroup:
        """Add an option named ``"long"`` or ``"long,s"``; no ``convert`` makes a flag."""
        name, _, short = spec.partition(",")
        if convert is None and (multiple or default is not _MISSING or required):
            raise ValueError(f"flag '{name}' cannot take defaults, lists or be required")
        option = _Option(name, short or None, help, convert, default, required, multiple)
        self._parser._register(option)
        self.options.append(option)
        return self


class OptionParser:
    """Option parser with grouped help text and an optional configuration file.

    Values given on the command line take priority over those in the
    configuration file, which take priority over defaults.
    """

    def __init__(self, caption: str = "Options", add_help: bool = True) -> None:
        self._groups: list[_OptionGroup] = [_OptionGroup(caption, self)]
        self._by_name: dict[str, _Option] = {}
        self._by_short: dict[str, _Option] = {}
        self._values: dict[str, Any] = {}
        self._uses_config = False
        if add_help:
            self._groups[0].add("help,h", help="Display this help text")

    def _register(self, option: _Option) -> None:
        if option.name in self._by_name:
            raise ValueError(f"option '--{option.name}' is already defined")
        if option.short:
            if len(option.short) != 1:
                raise ValueError(f"short name of '--{option.name}' must be one character")
            if option.short in self._by_short:
                raise ValueError(f"option '-{option.short}' is already defined")
            self._by_short[option.short] = option
        self._by_name[option.name] = option

    def add_group(self, title: str) -> _OptionGroup:
        """Create a new titled group of options and return it."""
        group = _OptionGroup(title, self)
        self._groups.append(group)
        return group

    def use_config_file(self) -> None:
        """Add a ``--config-file`` option whose file supplies further values."""
        if self._uses_config:
            return
        self._uses_config = True
        self.add_group("Configuration Options").add(
            "config-file", str, "Configuration file to read options from"
        )

    def __str__(self) -> str:
        lines: list[str] = []
        for group in self._groups:
            if not group.options:
                continue
            lines.append(f"{group.title}:")
            lines.extend(option.usage_line() for option in group.options)
            lines.append("")
        return "\n".join(lines).rstrip("\n")

    def parse(self, argv: list[str] | None = None) -> None:
        """Parse ``argv`` (default ``sys.argv[1:]``), then the config file if any.

        Prints the help text and exits when ``--help`` is given; raises
        OptionError for anything invalid or a required option left out.
        """
        args = list(sys.argv[1:] if argv is None else argv)
        values: dict[str, Any] = {}
        self._parse_command_line(args, values)

        if "help" in values and "help" in self._by_name:
            print(self)
            raise SystemExit(0)

        if self._uses_config and "config-file" in values:
            self._parse_config_file(Path(values["config-file"]), values)

        for option in self._by_name.values():
            if option.name not in values and option.default is not _MISSING:
                values[option.name] = option.default

        for option in self._by_name.values():
            if option.required and option.name not in values:
                raise OptionError(f"Required option '{option.name}' not supplied.")

        self._values = values

    def _parse_command_line(self, args: list[str], values: dict[str, Any]) -> None:
        i = 0
        while i < len(args):
            token = args[i]
            i += 1
            inline: str | None = None
            if token.startswith("--") and len(token) > 2:
                name, eq, rest = token[2:].partition("=")
                option = self._by_name.get(name)
                if option is None:
                    raise OptionError(f"unrecognised option '--{name}'")
                if eq:
                    inline = rest
            elif _looks_like_option(token):
                option = self._by_short.get(token[1])
                if option is None:
                    raise OptionError(f"unrecognised option '{token[:2]}'")
                if len(token) > 2:
                    inline = token[2:]
            else:
                raise OptionError(f"unexpected positional argument '{token}'")

            if option.name in values:
                raise OptionError(
                    f"option '--{option.name}' cannot be specified more than once"
                )

            if not option.takes_value:
                if inline is not None:
                    raise OptionError(f"option '--{option.name}' does not take a value")
                values[option.name] = True
                continue

            raw: list[str] = []
            if inline is not None:
                raw.append(inline)
            if option.multiple or not raw:
                while i < len(args) and not _looks_like_option(args[i]):
                    raw.append(args[i])
                    i += 1
                    if not option.multiple:
                        break
            if not raw:
                raise OptionError(f"the required argument for option '--{option.name}' is missing")

            converted = [option.convert_value(r) for r in raw]
            values[option.name] = converted if option.multiple else converted[0]

    def _parse_config_file(self, path: Path, values: dict[str, Any]) -> None:
        # An unreadable configuration file contributes no options.
        try:
            text = path.read_text()
        except OSError:
            return

        found: dict[str, list[str]] = {}
        prefix = ""
        for number, line in enumerate(text.splitlines(), start=1):
            line = line.split("#", 1)[0].strip()
            if not line:
                continue
            if line.startswith("[") and line.endswith("]"):
                section = line[1:-1].strip()
                prefix = f"{section}." if section else ""
                continue
            key, eq, value = line.partition("=")
            if not eq:
                raise OptionError(f"{path}:{number}: expected 'name = value'")
            name = prefix + key.strip()
            if name not in self._by_name:
                raise OptionError(f"unrecognised option '{name}' in {path}")
            found.setdefault(name, []).append(value.strip())

        for name, raws in found.items():
            if name in values:
                continue
            option = self._by_name[name]
            if not option.takes_value:
                word = raws[-1].lower()
                if word in _TRUE_WORDS:
                    values[name] = True
                elif word not in _FALSE_WORDS:
                    raise OptionError(f"the argument ('{raws[-1]}') for option '{name}' is invalid")
                continue
            if option.multiple:
                values[name] = [option.convert_value(r) for r in raws]
            elif len(raws) > 1:
                raise OptionError(f"option '{name}' cannot be specified more than once")
            else:
                values[name] = option.convert_value(raws[0])

    def get(self, name: str) -> Any:
        """Return the parsed (or default) value of an option."""
        try:
            return self._values[name]
        except KeyError:
            raise KeyError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._values