from argparse import ArgumentParser
import json
import logging
import random
import sys

from stylesync import __version__, paraphrase
from stylesync.data.store import ProfileStore
from stylesync.profile import SLIDERS, RewriteOptions, StyleProfile
from stylesync.text.detection import detect_ai_content
from stylesync.text.diagnosis import verify_style_match
from stylesync.text.fingerprint import extract_style
from stylesync.text.pov import detect_pov


def main(argv=None):
    parser = ArgumentParser(
        prog="stylesync",
        description="Capture a writing style from samples and rewrite text to match it.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log pipeline details to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # rewrite command
    rewrite_parser = subparsers.add_parser(
        "rewrite",
        help="Rewrite text toward a style profile",
    )
    add_input_arguments(rewrite_parser, "Text to rewrite (reads from stdin if not provided)")
    rewrite_parser.add_argument(
        "-o",
        "--output",
        type=str,
        help="Output file path (writes to stdout if not provided)",
    )
    for slider in SLIDERS:
        rewrite_parser.add_argument(
            f"--{slider}",
            type=float,
            default=0.5,
            help=f"Target {slider} between 0 and 1 (default: 0.5)",
        )
    rewrite_parser.add_argument(
        "--tone",
        type=str,
        default="neutral",
        help="Target tone (default: neutral)",
    )
    rewrite_parser.add_argument(
        "--lexicon",
        action="append",
        default=[],
        help="Word the output should use (repeatable)",
    )
    rewrite_parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible output",
    )
    rewrite_parser.add_argument(
        "--max-passes",
        type=int,
        default=2,
        help="Refinement pass budget (default: 2)",
    )
    rewrite_parser.add_argument(
        "--lexicon-notes",
        action="store_true",
        help="Append a note listing lexicon words the output does not use",
    )
    rewrite_parser.add_argument(
        "--store",
        type=str,
        default="datasets/profiles.parquet",
        help="Path to the profile store (default: datasets/profiles.parquet)",
    )
    rewrite_parser.add_argument(
        "--user",
        type=str,
        default="local",
        help="Profile owner in the store (default: local)",
    )
    rewrite_parser.add_argument(
        "--profile",
        type=str,
        help="ID of a stored profile to rewrite toward",
    )

    # analyze command
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Print the style fingerprint of text or sample files",
    )
    add_input_arguments(analyze_parser, "Text to analyze (reads from stdin if not provided)")
    analyze_parser.add_argument(
        "--compare",
        type=str,
        help="Score this file's text against the fingerprint instead",
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(0)

    if args.command == "rewrite":
        handle_rewrite(args)
    elif args.command == "analyze":
        handle_analyze(args)
    elif args.command == "version":
        handle_version()


def add_input_arguments(parser, text_help):
    parser.add_argument(
        "text",
        nargs="?",
        help=text_help,
    )
    parser.add_argument(
        "-f",
        "--file",
        type=str,
        help="Path to input text file",
    )
    parser.add_argument(
        "--sample",
        action="append",
        default=[],
        help="Path to a writing sample file (repeatable)",
    )


def read_file(path):
    try:
        with open(path, "r") as f:
            return f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)


def read_input(args):
    if args.file:
        return read_file(args.file)
    if args.text:
        return args.text
    # Read from stdin if no file or text argument provided
    return sys.stdin.read()


def handle_version():
    """Display version information."""
    print(f"stylesync version {__version__}")


def load_profile(args):
    """Build the target profile from a stored profile or from command-line options."""
    if args.profile:
        try:
            store = ProfileStore(args.store)
            return store.get(args.user, args.profile)
        except (KeyError, ValueError) as e:
            print(f"Error: Could not load profile: {e}", file=sys.stderr)
            sys.exit(1)

    samples = [read_file(path) for path in args.sample]
    try:
        return StyleProfile(
            formality=args.formality,
            pacing=args.pacing,
            descriptiveness=args.descriptiveness,
            directness=args.directness,
            tone=args.tone,
            custom_lexicon=args.lexicon,
            samples=samples,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def handle_rewrite(args):
    """Process a rewrite request."""
    text = read_input(args)
    profile = load_profile(args)
    rng = random.Random(args.seed) if args.seed is not None else None

    result = paraphrase(
        text,
        profile,
        max_passes=args.max_passes,
        options=RewriteOptions(include_lexicon_notes=args.lexicon_notes),
        rng=rng,
    )

    if args.output:
        try:
            with open(args.output, "w") as f:
                f.write(result.output)
        except IOError as e:
            print(f"Error writing to file: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(result.output)


def handle_analyze(args):
    """Print a fingerprint, or a style-match report when --compare is given."""
    samples = [read_file(path) for path in args.sample]
    if not samples:
        samples = [read_input(args)]
    if not any(sample.strip() for sample in samples):
        print("Error: Nothing to analyze", file=sys.stderr)
        sys.exit(1)

    style = extract_style(samples)
    if args.compare:
        profile = StyleProfile(samples=samples, fingerprint=style)
        report = verify_style_match(read_file(args.compare), profile)
        print(json.dumps(report.to_dict(), indent=2))
        return

    output = style.to_dict()
    output["pov"] = detect_pov("\n\n".join(samples)).to_dict()
    output["ai_detection"] = detect_ai_content("\n\n".join(samples)).to_dict()
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
