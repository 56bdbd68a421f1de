"""A minimal flag parser: each option is looked up anywhere in the argument list."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Sequence


class MissingOptionError(Exception):
    """Raised when a compulsory option does not appear in the arguments."""

    def __init__(self, option: Option, usage: str) -> None:
        self.option = option
        super().__init__(f"You must set this option:\n{option.describe()}\nUsage:\n{usage}")


class Option(ABC):
    """An option recognised by its long or short name."""

    def __init__(
        self, longname: str, shortname: str, description: str, compulsory: bool = False
    ) -> None:
        self.longname = longname
        self.shortname = shortname
        self.description = description
        self.compulsory = compulsory

    def matches(self, token: str) -> bool:
        """Whether ``token`` is this option's long or short name."""
        return token in (self.longname, self.shortname)

    def describe(self) -> str:
        """One line of usage text for this option."""
        return f"{self.longname},{self.shortname}\t{self.description}"

    @abstractmethod
    def consume(self, args: Sequence[str], index: int) -> int:
        """Take the option found at ``args[index]``; return the last index used."""


class ArgOption(Option):
    """An option followed by a value, converted with ``convert``."""

    def __init__(
        self,
        longname: str,
        shortname: str,
        description: str,
        convert: Callable[[str], Any] = str,
        compulsory: bool = False,
        default: Any = None,
    ) -> None:
        super().__init__(longname, shortname, description, compulsory)
        self.convert = convert
        self.value = default

    def consume(self, args: Sequence[str], index: int) -> int:
        if index + 1 >= len(args):
            raise ValueError(f"option {self.longname} needs a value")
        raw = args[index + 1]
        try:
            self.value = self.convert(raw)
        except ValueError:
            raise ValueError(f"invalid value {raw!r} for option {self.longname}") from None
        return index + 1


class BoolOption(Option):
    """An option that is true when present and false otherwise."""

    def __init__(
        self, longname: str, shortname: str, description: str, compulsory: bool = False
    ) -> None:
        super().__init__(longname, shortname, description, compulsory)
        self.value = False

    def consume(self, args: Sequence[str], index: int) -> int:
        self.value = True
        return index


class FlagParser:
    """Looks for each registered option in the argument list."""

    def __init__(self, argv: Sequence[str]) -> None:
        self._args = list(argv)
        self._options: list[Option] = []

    def add(self, option: Option) -> FlagParser:
        """Register an option; returns the parser for chaining."""
        self._options.append(option)
        return self

    def usage(self) -> str:
        """Usage text: one line per option."""
        return "".join(f"{option.describe()}\n" for option in self._options)

    def parse(self) -> int:
        """Set every option found and return how many were found.

        The first occurrence of an option wins. Raises MissingOptionError
        for a compulsory option that is absent.
        """
        found_count = 0
        for option in self._options:
            found = False
            for index, token in enumerate(self._args):
                if option.matches(token):
                    option.consume(self._args, index)
                    found_count += 1
                    found = True
                    break
            if option.compulsory and not found:
                raise MissingOptionError(option, self.usage())
        return found_count

    def __len__(self) -> int:
        return len(self._options)