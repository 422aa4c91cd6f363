"""Graph builder configuration."""

from dataclasses import dataclass, field

from choicegraph.parser.options import ParseMode, ParserOptions


@dataclass(frozen=True, slots=True)
class BuilderOptions:
    """Options for `FlowGraphBuilder`.

    `process_linked_scenes=False` links only the entry scene; jumps into other
    scenes then stay unresolved.
    """

    parser: ParserOptions = field(default_factory=ParserOptions)
    process_linked_scenes: bool = True

    @staticmethod
    def for_mode(mode: ParseMode) -> "BuilderOptions":
        return BuilderOptions(parser=ParserOptions.for_mode(mode))
