"""
kscope CLI Entrypoint.

This module provides the command-line interface for inspecting how kscope source parses.
It never compiles or runs the program; it shows the AST the code generator would receive.

Features:
    - Read source from command-line words (joined with spaces) or a `.ks` file.
    - Tokenize and parse with the default or an extended operator table.
    - Print the AST as node reprs, canonical source, or JSON.
    - Output to console or file.

Example usage:
    kscope "def add(x, y) x + y; add(1, 2)"
    kscope -f program.ks -t json -o program.json
    kscope --op "^=60" "2 ^ 3 * 4"

Functions:
    parse_operator_spec(spec: str) -> tuple[str, int]:
        Parses a `SYM=PREC` command-line operator entry.

    run_kscope(source: str, is_file: bool = False, target: str = "repr",
               out: Optional[str] = None, precedence: Optional[dict[str, int]] = None) -> str:
        Executes the pipeline (read → tokenize → parse → emit → output).

    main(argv: Optional[list[str]] = None) -> int:
        Parses CLI arguments and runs the pipeline, returning the exit status.
"""

import argparse
import logging
import sys

from kscope.kscope_constants import DEFAULT_PRECEDENCE
from kscope.kscope_lexer import tokenize
from kscope.kscope_parser import Parser, ParserError
from kscope.kscope_transpile import Transpiler

logger = logging.getLogger(__name__)


def parse_operator_spec(spec: str) -> tuple[str, int]:
    """Parse `SYM=PREC` into a precedence table entry.

    Raises:
        argparse.ArgumentTypeError: If the entry is not a single symbol and an integer.
    """
    symbol, sep, power = spec.partition("=")
    if not sep or len(symbol) != 1:
        raise argparse.ArgumentTypeError(f"expected SYM=PREC, got {spec!r}")
    try:
        return symbol, int(power)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"precedence must be an integer, got {power!r}"
        ) from None


def run_kscope(
    source: str,
    is_file: bool = False,
    target: str = "repr",
    out: str | None = None,
    precedence: dict[str, int] | None = None,
) -> str:
    """
    Run the kscope front end: read, tokenize, parse, and emit.

    Args:
        source (str): The kscope source, or a path to a `.ks` file when `is_file` is set.
        is_file (bool): If True, reads the source from the file at `source`. Defaults to False.
        target (str): Output format: 'repr', 'source' or 'json'. Defaults to 'repr'.
        out (str | None): Optional path to write the output to instead of stdout.
        precedence (dict[str, int] | None): Operator table; defaults to the built-in one.

    Returns:
        str: The emitted text.

    Raises:
        ValueError: If `is_file` is set and the path does not end with '.ks', or the
            precedence table is malformed.
        ParserError: If the source does not parse.
    """
    if is_file:
        if not source.endswith(".ks"):
            raise ValueError("Only .ks files are supported.")
        with open(source, encoding="utf-8") as f:
            source = f.read()

    tokens = tokenize(source)
    logger.debug("tokenized %d tokens", len(tokens))
    ast = Parser(tokens, precedence).parse()
    logger.debug("parsed %d top-level nodes", len(ast))

    if target == "repr":
        text = "\n".join(repr(node) for node in ast)
    else:
        text = Transpiler(target).transpile(ast)

    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        logger.info("wrote %s", out)
    else:
        print(text)
    return text


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the kscope CLI.

    Supported flags:
        - `-f`, `--file`: Read source from a `.ks` file instead of the positional words.
        - `-t`, `--target`: Output format ('repr', 'source' or 'json'), default is 'repr'.
        - `-o`, `--out`: Write output to a file.
        - `--op SYM=PREC`: Add or override an operator precedence (repeatable).
        - `-v`, `--verbose`: Enable debug logging.

    Returns:
        int: 0 on success, 1 on a syntax error, 2 on a usage error.
    """
    parser = argparse.ArgumentParser(prog="kscope")
    parser.add_argument("source", nargs="*", help="Source words, joined with spaces")
    parser.add_argument("-f", "--file", metavar="PATH", help="Read source from a .ks file")
    parser.add_argument(
        "-t",
        "--target",
        choices=("repr", "source", "json"),
        default="repr",
        help="Output format (default: repr)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "--op",
        dest="operators",
        metavar="SYM=PREC",
        type=parse_operator_spec,
        action="append",
        default=[],
        help="Add or override an operator precedence",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.file and args.source:
        parser.error("give either source words or --file, not both")
    if not args.file and not args.source:
        parser.print_usage(sys.stderr)
        return 2

    precedence = dict(DEFAULT_PRECEDENCE)
    precedence.update(dict(args.operators))

    try:
        run_kscope(
            source=args.file or " ".join(args.source),
            is_file=bool(args.file),
            target=args.target,
            out=args.out,
            precedence=precedence,
        )
    except ParserError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
