"""Parser modes and configuration options."""

from dataclasses import dataclass
from enum import StrEnum


class ParseMode(StrEnum):
    """Top-level parser behavior profile."""

    STRICT = "strict"
    PERMISSIVE = "permissive"


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """Flags controlling error recovery and indentation checks."""

    mode: ParseMode = ParseMode.STRICT
    recover_from_errors: bool = False
    warn_on_empty_blocks: bool = True

    @staticmethod
    def for_mode(mode: ParseMode) -> "ParserOptions":
        if mode == ParseMode.PERMISSIVE:
            return ParserOptions(
                mode=mode,
                recover_from_errors=True,
                warn_on_empty_blocks=True,
            )

        return ParserOptions(
            mode=mode,
            recover_from_errors=False,
            warn_on_empty_blocks=True,
        )
