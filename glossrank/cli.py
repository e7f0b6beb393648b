"""glossrank CLI - dictionary definition ranking.

Main command-line interface for ranking analyzer output.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .engine.filters import FilterProfile, filter_to_dict, get_profile_filter, load_filter
from .engine.ranker import Ranker
from .parser.results import AnalyzerResultsParser, read_analysis_file

_PROFILE_NAMES = [p.value for p in FilterProfile]


def read_content(input_arg: str | None) -> str:
    """Read input content from a file path, '-' for stdin, or piped stdin.

    Args:
        input_arg: File path string, '-' for explicit stdin, or None to check
                   for piped stdin automatically.

    Returns:
        File content as a string.
    """
    if input_arg == '-' or (input_arg is None and not sys.stdin.isatty()):
        return sys.stdin.read()

    if input_arg is None:
        raise ValueError("input_arg must be a file path or '-' for stdin")

    return read_analysis_file(input_arg)


def list_profiles() -> None:
    """Print every predefined filter profile and exit."""
    print(f"glossrank filter profiles (v{__version__})")
    print("=" * 50)
    for profile in FilterProfile:
        print(f"  {profile.value}")
        for i, tier in enumerate(filter_to_dict(get_profile_filter(profile))["tiers"], 1):
            items = ", ".join(
                f"{item.get('tag') or item['predicate']}"
                f"{'=' + item['value'] if 'value' in item else ''} ({item['weight']:+d})"
                for item in tier
            )
            print(f"    tier {i}: {items}")


def main(args: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog='glossrank',
        description='Pick the best dictionary definitions, readings and audio for analyzed Japanese words',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  glossrank analysis.json
  glossrank -                                      # read from stdin
  cat analysis.jsonl | glossrank                   # pipe input
  glossrank analysis.json --format markdown --output words.md
  glossrank analysis.json --format json --scores
  glossrank analysis.json --profile kana --no-color
  glossrank analysis.json --filter my_filter.json
  glossrank --list-profiles
        """
    )

    parser.add_argument(
        'input',
        nargs='?',
        help='Analyzer output file, or "-" to read from stdin (omit when piping or using --list-profiles)'
    )

    parser.add_argument(
        '--list-profiles',
        action='store_true',
        help='Print the predefined filter profiles and exit'
    )

    parser.add_argument(
        '-t', '--type',
        choices=['auto', 'json', 'jsonl'],
        default='auto',
        help='Input layout (default: auto-detect)'
    )

    parser.add_argument(
        '-f', '--format',
        choices=['terminal', 'markdown', 'json'],
        default='terminal',
        help='Output format (default: terminal)'
    )

    parser.add_argument(
        '-o', '--output',
        type=Path,
        help='Output file (markdown and json formats; default: stdout)'
    )

    parser.add_argument(
        '-p', '--profile',
        choices=_PROFILE_NAMES,
        default='default',
        help='Filter profile (default: default)'
    )

    parser.add_argument(
        '--filter',
        metavar='FILE',
        type=Path,
        help='JSON filter file (overrides --profile)'
    )

    parser.add_argument(
        '--scores',
        action='store_true',
        help='Include per-entry score breakdowns'
    )

    parser.add_argument(
        '--max-examples',
        metavar='N',
        type=int,
        default=2,
        help='Examples shown per word in terminal output (default: 2)'
    )

    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output (terminal only)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parsed_args = parser.parse_args(args)

    if parsed_args.list_profiles:
        list_profiles()
        return 0

    input_arg = parsed_args.input

    # Support piped stdin when no input argument is given
    if input_arg is None and not sys.stdin.isatty():
        input_arg = '-'

    if input_arg is None:
        parser.error('the following arguments are required: input (or pipe data via stdin, or use --list-profiles)')

    if input_arg != '-':
        input_path = Path(input_arg)
        if not input_path.exists():
            print(f"Error: Input file not found: {input_arg}", file=sys.stderr)
            return 1
        if not input_path.is_file():
            print(f"Error: Input is not a file: {input_arg}", file=sys.stderr)
            return 1

    if parsed_args.filter is not None and not parsed_args.filter.is_file():
        print(f"Error: Filter file not found: {parsed_args.filter}", file=sys.stderr)
        return 1

    try:
        source = 'stdin' if input_arg == '-' else input_arg
        if parsed_args.verbose:
            print(f"Parsing input: {source}", file=sys.stderr)

        results_parser = AnalyzerResultsParser()
        contexts = results_parser.parse(read_content(input_arg), parsed_args.type)

        if parsed_args.verbose:
            print(f"Parsed {len(contexts)} words", file=sys.stderr)
            if results_parser.skipped_records or results_parser.skipped_entries:
                print(
                    f"Skipped {results_parser.skipped_records} malformed records, "
                    f"{results_parser.skipped_entries} malformed entries",
                    file=sys.stderr
                )

        profile = FilterProfile(parsed_args.profile)
        custom_filter = None
        profile_label = profile.value
        if parsed_args.filter is not None:
            custom_filter = load_filter(parsed_args.filter)
            profile_label = parsed_args.filter.name
            if parsed_args.verbose:
                print(f"Loaded filter with {len(custom_filter)} tiers", file=sys.stderr)

        ranker = Ranker(profile=profile, custom_filter=custom_filter)
        results = ranker.select_all(contexts)

        if parsed_args.format == 'terminal':
            from .output.terminal import TerminalOutput

            output = TerminalOutput(
                no_color=parsed_args.no_color,
                profile=profile_label,
                ranker=ranker,
            )
            output.print_header(source, word_count=len(results))
            output.print_results(results, max_examples=parsed_args.max_examples)
            if parsed_args.scores:
                for context, _ in results:
                    output.print_score_breakdown(context)
            output.print_summary(results)

        elif parsed_args.format == 'markdown':
            from .output.markdown import MarkdownOutput

            content = MarkdownOutput().generate(results, profile=profile_label, source=source)

            if parsed_args.output:
                parsed_args.output.write_text(content, encoding='utf-8')
                print(f"Report saved to: {parsed_args.output}", file=sys.stderr)
            else:
                print(content)

        elif parsed_args.format == 'json':
            from .output.json_out import JSONOutput

            content = JSONOutput(ranker, profile=profile_label).to_json(results, include_scores=parsed_args.scores)

            if parsed_args.output:
                parsed_args.output.write_text(content, encoding='utf-8')
                print(f"Report saved to: {parsed_args.output}", file=sys.stderr)
            else:
                print(content)

        return 0

    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except (MemoryError, RecursionError):
        raise
    except Exception as e:
        print(f"Error ({type(e).__name__}): {e}", file=sys.stderr)
        if parsed_args.verbose:
            import traceback
            traceback.print_exc()
        else:
            print("Use --verbose for full traceback", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
