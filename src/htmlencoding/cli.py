"""Command-line interface for htmlencoding."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import htmlencoding
from htmlencoding._utils import DEFAULT_ENCODING
from htmlencoding.pipeline import EncodingDecodeError


def _report(name: str, data: bytes, args: argparse.Namespace) -> bool:
    try:
        decision, text = htmlencoding.determine_encoding(
            data,
            args.content_type,
            default_encoding=args.default_encoding,
            errors=args.errors,
        )
    except EncodingDecodeError as e:
        print(
            f"htmlsniff: {name}: not valid {e.decision.encoding.name}: {e.reason} "
            f"at byte {e.start}",
            file=sys.stderr,
        )
        return False
    if args.decode:
        sys.stdout.write(text)
    elif args.minimal:
        print(decision.encoding.name)
    else:
        print(f"{name}: {decision.encoding.name} ({decision.confidence.name.lower()})")
    return True


def main(argv: list[str] | None = None) -> int:
    """Run the ``htmlsniff`` command-line tool.

    :param argv: Command-line arguments.  Defaults to ``sys.argv[1:]``.
    :returns: The process exit status.
    """
    parser = argparse.ArgumentParser(
        description="Determine the character encoding of HTML documents."
    )
    parser.add_argument("files", nargs="*", help="Files to sniff")
    parser.add_argument(
        "-t",
        "--content-type",
        default=None,
        help="Content-Type header value to treat as transport metadata",
    )
    parser.add_argument(
        "-d",
        "--default-encoding",
        default=DEFAULT_ENCODING,
        help="Encoding to assume when nothing is declared (default: %(default)s)",
    )
    parser.add_argument(
        "--errors",
        default=None,
        help="Codec error handler to decode with, e.g. 'replace'",
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--minimal", action="store_true", help="Output only the encoding name"
    )
    output.add_argument(
        "--decode", action="store_true", help="Write the decoded text to stdout"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log each sniffing stage"
    )
    parser.add_argument(
        "--version", action="version", version=f"htmlsniff {htmlencoding.__version__}"
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if htmlencoding.lookup(args.default_encoding) is None:
        parser.error(f"unknown encoding: {args.default_encoding}")

    ok = True
    if args.files:
        for filepath in args.files:
            try:
                data = Path(filepath).read_bytes()
            except OSError as e:
                print(f"htmlsniff: {filepath}: {e}", file=sys.stderr)
                ok = False
                continue
            ok = _report(filepath, data, args) and ok
    else:
        ok = _report("stdin", sys.stdin.buffer.read(), args)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
