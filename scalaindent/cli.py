#!/usr/bin/env python3
"""
CLI tool for reindenting Scala source files.
"""

import argparse
import logging
import os
import sys

from scalaindent.config import IndentConfig, RunOnStrategy
from scalaindent.main import Indenter


def _build_parser():
    parser = argparse.ArgumentParser(
        description="Reindent a Scala source file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  scala-indent Foo.scala                   # Reindent Foo.scala in place
  scala-indent Foo.scala Out.scala         # Write the result to Out.scala
  scala-indent Foo.scala --stdout          # Print the result
  scala-indent Foo.scala --line 12         # Print the column for line 12
  scala-indent Foo.scala --check           # Exit 1 if the file would change
  scala-indent Foo.scala --strategy reluctant --no-align-forms
        """,
    )

    parser.add_argument("scala_file", help="Path to the input Scala file")
    parser.add_argument(
        "output_file",
        nargs="?",
        help="Optional path to the output file (default: rewrite the input)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log how each line was indented",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the reindented source instead of writing a file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Do not write anything; exit 1 if the file is not indented",
    )
    parser.add_argument(
        "--line",
        type=int,
        help="Only print the indentation column of this 1-based line",
    )
    parser.add_argument(
        "--step",
        type=int,
        default=2,
        help="Columns per indentation step (default: 2)",
    )
    parser.add_argument(
        "--strategy",
        choices=[s.label for s in RunOnStrategy],
        default=RunOnStrategy.EAGER.label,
        help="Run-on line detection strategy (default: eager)",
    )
    parser.add_argument(
        "--no-align-forms",
        action="store_true",
        help="Do not align else/catch/finally/yield under their introducing keyword",
    )
    parser.add_argument(
        "--no-value-expression",
        action="store_true",
        help="No extra step for multi-line value expressions",
    )
    parser.add_argument(
        "--no-align-parameters",
        action="store_true",
        help="Indent list elements one step instead of aligning them",
    )
    return parser


def scala_indent(argv=None):
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    scala_file = args.scala_file

    if not os.path.exists(scala_file):
        print(f"Error: File '{scala_file}' not found")
        sys.exit(1)

    try:
        config = IndentConfig.from_mapping(
            {
                "step": args.step,
                "align-forms": not args.no_align_forms,
                "indent-value-expression": not args.no_value_expression,
                "align-parameters": not args.no_align_parameters,
                "run-on-strategy": args.strategy,
            }
        )
        indenter = Indenter(config)

        with open(scala_file, "r", encoding="utf-8") as f:
            content = f.read()

        if args.line is not None:
            source = indenter.source(content)
            if not 1 <= args.line <= source.line_count:
                print(f"Error: Line {args.line} is out of range")
                sys.exit(1)
            pos = source.line_start(args.line - 1)
            print(indenter.calculate_indent(content, pos))
            return

        result = indenter.reindent(content)

        if args.check:
            if result != content:
                print(f"{scala_file} would be reindented")
                sys.exit(1)
            if args.verbose:
                print(f"{scala_file} is correctly indented")
            return

        if args.stdout:
            sys.stdout.write(result)
            return

        output_file = args.output_file or scala_file
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(result)

        print(f"Saved reindented source to {output_file}")

    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    scala_indent()
