# src/cleandiff/cli.py
import sys
import argparse
from pathlib import Path

# Module imports
from cleandiff.cleaner import clean_diff
from cleandiff.config import DEFAULT_IGNORE_FILE, DETECTOR_OPTIONS
from cleandiff.core.ignore import load_ignore_spec, make_passthrough
from cleandiff.core.reconstructor import reconstruct
from cleandiff.models import CleanDiffConfig, CleanedDiff
from cleandiff.utils.token_count import estimate_savings

# category -> (flag, help)
DETECTOR_FLAGS = {
    "whitespace": ("--whitespace", "Ignore whitespace-only changes and blank lines"),
    "comment": ("--comments", "Ignore comment-only changes"),
    "quote": ("--quotes", "Ignore quote-style changes"),
    "trailing-comma": ("--trailing-commas", "Ignore added/removed trailing commas"),
    "semicolon": ("--semicolons", "Ignore optional semicolons"),
    "import": ("--imports", "Ignore import reordering (JS/TS/Vue/Svelte/Go)"),
    "line-wrap": ("--line-wrap", "Ignore line-wrapping changes (JS/TS/Vue/Svelte)"),
}


def create_arg_parser():
    parser = argparse.ArgumentParser(
        description="Strip formatting-only noise from a unified diff so only meaningful edits remain."
    )
    parser.add_argument("diff_file", type=str, nargs="?", default="-", help="Diff file to clean ('-' for stdin)")
    parser.add_argument("-o", "--output", type=str, default=None, help="Write the cleaned diff here (default: stdout)")

    group = parser.add_argument_group("formatting categories (all enabled when none is given)")
    group.add_argument("-a", "--all", action="store_true", help="Ignore every formatting category")
    for category, (flag, help_text) in DETECTOR_FLAGS.items():
        group.add_argument(flag, dest=category.replace("-", "_"), action="store_true", help=help_text)

    parser.add_argument("--language", type=str, default=None, help="Language hint (advisory)")
    parser.add_argument(
        "-x", "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Gitignore-style pattern of files to pass through untouched (repeatable)",
    )
    parser.add_argument(
        "--ignore-file",
        type=str,
        default=None,
        help=f"File of pass-through patterns (default: ./{DEFAULT_IGNORE_FILE} if present)",
    )
    parser.add_argument("-s", "--stats", action="store_true", help="Print a summary to stderr")
    parser.add_argument("-l", "--list-changes", action="store_true", help="List detected formatting changes on stderr")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress warnings, --stats and --list-changes output")
    return parser


def build_config(args) -> CleanDiffConfig:
    """Maps CLI flags onto a CleanDiffConfig. No category flag means all of them."""
    selected = {category for category in DETECTOR_FLAGS if getattr(args, category.replace("-", "_"))}
    if args.all or not selected:
        return CleanDiffConfig.all_enabled(language=args.language)
    options = {option: category in selected for category, option in DETECTOR_OPTIONS}
    return CleanDiffConfig(language=args.language, **options)


def read_diff(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def warn_inconsistent_hunks(result: CleanedDiff):
    for diff_file in result.original:
        for hunk in diff_file.hunks:
            if not hunk.is_consistent():
                old_count, new_count = hunk.tally()
                print(
                    f"Warning: {diff_file.path}: '{hunk.header}' declares "
                    f"-{hunk.declared_old_count} +{hunk.declared_new_count} "
                    f"but contains -{old_count} +{new_count}",
                    file=sys.stderr,
                )


def print_changes(result: CleanedDiff):
    print("\n--- Formatting Changes ---", file=sys.stderr)
    print(f"{'Category':<15} | {'Old lines':<20} | {'New lines':<20} | {'File'}", file=sys.stderr)
    print("-" * 80, file=sys.stderr)
    for change in result.format_changes:
        old_lines = ",".join(str(n) for n in change.old_lines) or "-"
        new_lines = ",".join(str(n) for n in change.new_lines) or "-"
        print(f"{change.category:<15} | {old_lines:<20} | {new_lines:<20} | {change.file_path}", file=sys.stderr)
    print("-" * 80, file=sys.stderr)


def print_stats(result: CleanedDiff, original_text: str, cleaned_text: str):
    stats = result.statistics
    print("\n--- cleandiff summary ---", file=sys.stderr)
    print(f"Files:                   {stats.total_files}", file=sys.stderr)
    print(f"Files with formatting:   {stats.files_with_format_changes}", file=sys.stderr)
    print(f"Lines removed:           {stats.lines_removed}", file=sys.stderr)
    print(f"Reduction:               {stats.percentage_reduced:.1f}%", file=sys.stderr)
    tokens = estimate_savings(original_text, cleaned_text)
    print(
        f"Est. tokens:             {tokens.before} -> {tokens.after} ({tokens.percentage:.1f}% saved)",
        file=sys.stderr,
    )


def main(argv=None):
    try:
        # 1. Setup
        parser = create_arg_parser()
        args = parser.parse_args(argv)
        config = build_config(args)

        try:
            diff_text = read_diff(args.diff_file)
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error: Could not read '{args.diff_file}': {e}", file=sys.stderr)
            sys.exit(1)

        # 2. Pass-through rules
        ignore_file = Path(args.ignore_file) if args.ignore_file else Path.cwd() / DEFAULT_IGNORE_FILE
        if args.ignore_file and not ignore_file.exists() and not args.quiet:
            print(f"Warning: Ignore file '{ignore_file}' not found", file=sys.stderr)
        spec = load_ignore_spec(ignore_file, extra_patterns=args.exclude)

        # 3. Clean
        result = clean_diff(diff_text, config, make_passthrough(spec))
        cleaned_text = reconstruct(result.cleaned)

        if not args.quiet:
            warn_inconsistent_hunks(result)
            if args.list_changes:
                print_changes(result)
            if args.stats:
                print_stats(result, diff_text, cleaned_text)

        # 4. Output
        if args.output:
            try:
                with open(args.output, "w", encoding="utf-8") as f:
                    f.write(cleaned_text)
            except IOError as e:
                print(f"Error writing file: {e}", file=sys.stderr)
                sys.exit(1)
        else:
            sys.stdout.write(cleaned_text)

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)

    except Exception as e:
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
