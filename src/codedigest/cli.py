"""Command-line interface for codedigest."""
import os
import sys
import logging

import click

from . import __version__
from .core.engine import DigestEngine
from .core.models import (
    IGNORE_PRESETS, Config, Error, OutputFormat, Processing, Success,
    apply_preset, merge_patterns, parse_patterns,
)
from .utils.console import THEMES, ConsoleManager


def setup_logging(debug: bool) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else logging.WARNING
    format_string = '[%(levelname)s] %(message)s'

    logging.basicConfig(
        level=level,
        format=format_string,
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    # Reduce noise from external libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("github").setLevel(logging.WARNING)


def build_exclude_patterns(excludes, presets) -> tuple:
    """Merge repeated ``--exclude`` values (comma lists allowed) and named presets."""
    patterns: tuple = ()
    for value in excludes:
        patterns = merge_patterns(patterns, parse_patterns(value))
    for preset in presets:
        patterns = apply_preset(patterns, preset)
    return patterns


@click.command()
@click.argument('source', required=True)
@click.option('--output-dir', '-o', default='output', help='Output directory for digest files')
@click.option('--format', '-f', 'output_format', type=click.Choice([f.value for f in OutputFormat]),
              default=OutputFormat.PLAIN.value, help='Framing for the header, tree and file sections')
@click.option('--token-limit', '-t', type=click.IntRange(min=0), default=0,
              help='Maximum tokens per output part (0 = single file)')
@click.option('--max-file-size', type=click.IntRange(min=0), default=0,
              help='Skip files larger than this many KB (0 = unlimited)')
@click.option('--exclude', '-e', multiple=True, help='Exclude pattern(s); repeatable, comma lists allowed')
@click.option('--preset', multiple=True, type=click.Choice(sorted(IGNORE_PRESETS)),
              help='Add a named bundle of exclude patterns; repeatable')
@click.option('--ignore-file', type=click.Path(dir_okay=False), help='Additional ignore file to apply')
@click.option('--no-gitignore', is_flag=True, help="Don't apply the root .gitignore")
@click.option('--remove-comments', is_flag=True, help='Strip comments (best-effort regex)')
@click.option('--compact', is_flag=True, help='Drop blank lines')
@click.option('--skip-tree', is_flag=True, help='Omit the directory tree')
@click.option('--no-tokens', is_flag=True, help='Disable token counting when no token limit is set')
@click.option('--branch', help='Branch or ref for GitHub sources')
@click.option('--theme', type=click.Choice(list(THEMES)), default='manhattan', help='Terminal color theme')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.version_option(version=__version__, prog_name='codedigest')
def main(source: str, output_dir: str, output_format: str, token_limit: int, max_file_size: int,
         exclude, preset, ignore_file: str, no_gitignore: bool, remove_comments: bool,
         compact: bool, skip_tree: bool, no_tokens: bool, branch: str, theme: str,
         debug: bool) -> None:
    """
    Build an LLM-ready text digest of a local directory or GitHub repository.

    SOURCE can be:
    - Local directory path: /path/to/project or .
    - GitHub URL: https://github.com/owner/repo[/tree/branch]
    - GitHub shorthand: owner/repo

    Examples:

        codedigest . --preset python

        codedigest ./app -t 100000 -f markdown --remove-comments --compact

        codedigest psf/requests --branch main -e "*.txt,docs"
    """
    console = ConsoleManager(theme=theme)
    setup_logging(debug)

    try:
        config = Config(
            source=source,
            output_dir=output_dir,
            custom_ignore_file=ignore_file,
            exclude_patterns=build_exclude_patterns(exclude, preset),
            use_gitignore=not no_gitignore,
            remove_comments=remove_comments,
            compact_mode=compact,
            skip_tree=skip_tree,
            show_token_count=not no_tokens,
            output_format=output_format,
            max_file_size_kb=max_file_size,
            token_limit=token_limit,
            branch=branch,
        )

        console.print_info(f"Source: {source}")
        engine = DigestEngine()
        final_state = None

        with console.progress() as progress:
            task = progress.add_task("Scanning...", total=None)
            for state in engine.process_in_background(config):
                if isinstance(state, Processing):
                    progress.update(task, description=state.current_file,
                                    total=state.total_files, completed=state.processed)
                if state.is_terminal:
                    final_state = state

        if isinstance(final_state, Success):
            console.print_success(final_state.message)
            console.print_separator()
            console.print(f"[info]FILES DIGESTED:[/info] [number]{final_state.total_source_files}[/number]")
            if config.counts_tokens:
                console.print(f"[info]TOTAL TOKENS:[/info] [token_count]{final_state.total_tokens:,}[/token_count]")
            console.print("[info]OUTPUT FILES:[/info]")
            for path in final_state.files:
                console.print(f"  [dim]>[/dim] [path]{os.path.relpath(path)}[/path]")
            return

        message = final_state.message if isinstance(final_state, Error) else "Digest run ended without a result"
        console.print_error(message)
        sys.exit(1)

    except KeyboardInterrupt:
        console.print_warning("Process terminated by user")
        sys.exit(1)

    except ValueError as e:
        console.print_error(str(e))
        if debug:
            console.print_exception()
        sys.exit(1)


if __name__ == '__main__':
    main()
