"""
Numbered menu parsing shared by the package and binary installers.

Both menus use the same convention: option 1 means "everything",
options 2..N pick individual entries, and the operator types a
comma-separated list such as ``2, 3``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

ALL_OPTION = 1


@dataclass
class MenuSelection:
    """What the operator picked.  Returned, never stored globally."""

    select_all: bool = False
    choices: list[int] = field(default_factory=list)
    invalid: list[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.select_all and not self.choices


def parse_menu_choices(raw: str, max_choice: int, *, sort: bool = False) -> MenuSelection:
    """Parse ``"1"``, ``"2,3"``, ``" 3 , 2,2 "`` and the like.

    Entries outside 1..max_choice are collected in ``invalid`` and
    skipped, so one typo does not abort the whole selection.
    Duplicates are dropped; first-seen order is kept unless ``sort``.
    """
    selection = MenuSelection()
    for token in raw.split(","):
        token = token.replace(" ", "").strip()
        if not token:
            continue
        if not token.isdigit():
            selection.invalid.append(token)
            continue
        number = int(token)
        if number == ALL_OPTION:
            selection.select_all = True
        elif ALL_OPTION < number <= max_choice:
            if number not in selection.choices:
                selection.choices.append(number)
        else:
            selection.invalid.append(token)

    if sort:
        selection.choices.sort()
    return selection
