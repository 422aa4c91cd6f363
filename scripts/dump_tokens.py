#!/usr/bin/env python
import argparse
from contextlib import redirect_stdout
from pathlib import Path

from choicegraph.lexer import Scene, dump_tokens, scan_scene


def main() -> None:
    parser = argparse.ArgumentParser(description="Dump the token stream of one ChoiceScript scene")
    parser.add_argument("scene_file", type=Path, help="Path to a scene .txt file")
    parser.add_argument("--output", type=Path, default=None, help="Write the dump here instead of stdout")
    args = parser.parse_args()

    input_path: Path = args.scene_file
    text = input_path.read_text(encoding="utf-8-sig")
    stream = scan_scene(Scene(input_path.stem, text))

    if args.output is None:
        dump_tokens(stream)
        return

    output_path: Path = args.output
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f, redirect_stdout(f):
        dump_tokens(stream)

    print(f"Wrote {len(stream)} tokens to {output_path}")


if __name__ == "__main__":
    main()
