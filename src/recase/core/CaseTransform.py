# recase/core/CaseTransform.py
"""CaseTransform Module
====================
This module implements the pure case-mapping algorithms behind the four case
commands (`upper_case`, `lower_case`, `swap_case`, `title_case`) and the closed
`CaseCommand` enumeration that binds each command name to its transform.

Key Features:
-------------
- Simple Case Mapping: Every codepoint is mapped on its own, so the result
  always has exactly as many codepoints as the input. Full casing expansions
  (``ß`` -> ``SS``, ``ŉ`` -> ``ʼN``) are never applied; such codepoints are
  left unchanged.
- Context Free: No locale rules and no contextual rules (Greek final sigma,
  Turkish dotted/dotless i) are applied.
- Word-Initial Title Case: Only the first letter of each run of alphabetic
  codepoints is uppercased. Word interiors are left exactly as given.
- Closed Command Set: `CaseCommand` is an `enum.Enum`; looking up an unknown
  name raises `UnknownCommandError`.

All functions here are stateless and reentrant; they are safe to call from
several threads on independent inputs.
"""

import enum
import logging
from typing import Callable

from recase.core.Errors import UnknownCommandError


# Codepoints whose full lowercase mapping expands to several codepoints but
# whose simple (one-to-one) mapping exists. U+0130 is the only unconditional one.
_SIMPLE_LOWER_EXCEPTIONS: dict[str, str] = {
    "İ": "i",  # LATIN CAPITAL LETTER I WITH DOT ABOVE
}


def simple_upper(char: str) -> str:
    """Returns the simple (one-to-one) uppercase mapping of a single codepoint.

    `str.upper` applies full case mapping, which may expand a codepoint into
    several. When it does, the titlecase mapping is tried next, because for the
    Greek letters with ypogegrammeni (e.g. ``ᾳ``) the simple uppercase mapping
    coincides with the titlecase one. If neither is a single codepoint, the
    character has no simple uppercase mapping and is returned unchanged.

    Args:
        char: A string of exactly one codepoint.

    Returns:
        A string of exactly one codepoint.
    """
    mapped = char.upper()
    if len(mapped) == 1:
        return mapped
    mapped = char.title()
    if len(mapped) == 1:
        return mapped
    return char


def simple_lower(char: str) -> str:
    """Returns the simple (one-to-one) lowercase mapping of a single codepoint."""
    mapped = char.lower()
    if len(mapped) == 1:
        return mapped
    return _SIMPLE_LOWER_EXCEPTIONS.get(char, char)


def is_case_bearing(char: str) -> bool:
    """True if the codepoint has a simple upper- or lowercase mapping other than itself."""
    return simple_upper(char) != char or simple_lower(char) != char


def upper(text: str) -> str:
    """Uppercases every codepoint that has a simple uppercase mapping."""
    return "".join(simple_upper(char) for char in text)


def lower(text: str) -> str:
    """Lowercases every codepoint that has a simple lowercase mapping."""
    return "".join(simple_lower(char) for char in text)


def swap(text: str) -> str:
    """Swaps the case of every cased codepoint.

    Lowercase codepoints with a simple uppercase mapping are uppercased and
    uppercase codepoints with a simple lowercase mapping are lowercased.
    Titlecase digraphs (``ǅ``) and uncased codepoints are kept as they are.

    Example:
        >>> swap("Hello, World!")
        'hELLO, wORLD!'
    """
    swapped = []
    for char in text:
        if char.islower():
            swapped.append(simple_upper(char))
        elif char.isupper():
            swapped.append(simple_lower(char))
        else:
            swapped.append(char)
    return "".join(swapped)


def word_starts(text: str) -> list[int]:
    """Returns the offsets at which a run of alphabetic codepoints begins.

    A codepoint is alphabetic when it is letter-classified or case-bearing, so
    circled letters and Roman numerals count too. A position is a word start
    when its codepoint is alphabetic and it is either the first position or
    follows a non-alphabetic codepoint. Digits, whitespace, punctuation and
    apostrophes all end a run, so ``he'll`` has word starts at 0 and 3.
    """
    starts = []
    previous_alpha = False
    for index, char in enumerate(text):
        current_alpha = char.isalpha() or is_case_bearing(char)
        if current_alpha and not previous_alpha:
            starts.append(index)
        previous_alpha = current_alpha
    return starts


def title(text: str) -> str:
    """Uppercases the first codepoint of every word run, leaving the rest untouched.

    Word interiors are not lowercased, so ``"mIxEd"`` becomes ``"MIxEd"``.

    Example:
        >>> title("and he'll be warm")
        "And He'Ll Be Warm"
    """
    starts = word_starts(text)
    if not starts:
        return text
    chars = list(text)
    for index in starts:
        chars[index] = simple_upper(chars[index])
    return "".join(chars)


## ==================== CaseCommand Enumeration ====================
class CaseCommand(enum.Enum):
    """The closed set of case commands.

    Each member's value is the command name used by the host dispatch layer.
    The transform bound to a member is looked up in `_TRANSFORMS`, so adding a
    member without a transform fails loudly in `apply`.
    """

    UPPER = "upper_case"
    LOWER = "lower_case"
    SWAP = "swap_case"
    TITLE = "title_case"

    @classmethod
    def from_name(cls, name: str) -> "CaseCommand":
        """Resolves a command name to its member.

        Raises:
            UnknownCommandError: If `name` is not one of the recognised names.
        """
        try:
            return cls(name)
        except ValueError:
            logging.debug(f"CaseCommand: unknown command name {name!r}")
            raise UnknownCommandError(name) from None

    @property
    def transform(self) -> Callable[[str], str]:
        return _TRANSFORMS[self]

    def apply(self, text: str) -> str:
        """Applies this command's transform to `text`."""
        return _TRANSFORMS[self](text)


_TRANSFORMS: dict[CaseCommand, Callable[[str], str]] = {
    CaseCommand.UPPER: upper,
    CaseCommand.LOWER: lower,
    CaseCommand.SWAP: swap,
    CaseCommand.TITLE: title,
}


def command_names() -> list[str]:
    """Lists the recognised command names in declaration order."""
    return [command.value for command in CaseCommand]
