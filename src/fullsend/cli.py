"""
CLI entrypoint for fullsend.
"""

from __future__ import annotations

import argparse
import sys
import traceback
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

import pyperclip
from colorama import Fore, Style

from . import __version__
from .config import DEFAULT_CONFIG, FORMATS, Config, load_config, load_config_from_disk, save_config_to_disk
from .core import BundleResult, bundle
from .errors import ConfigFileError, FullsendError, OutputError
from .ui import Spinner, render_empty, render_failures, render_success, render_tree

MIB = 1024 * 1024


def _megabytes(value: str) -> int:
    try:
        mb = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size: {value!r}")
    if mb < 0:
        raise argparse.ArgumentTypeError(f"size must not be negative: {value}")
    return mb


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="fullsend",
        description="Bundle your codebase for AI chat interfaces. "
        "Run 'fullsend config' to edit the saved defaults.",
    )
    p.add_argument("directory", nargs="?", type=Path, default=Path("."), help="Directory to scan")
    p.add_argument("-o", "--output", type=Path, help="Write the bundle to this file")
    p.add_argument("--stdout", action="store_true", help="Print the bundle to stdout")
    p.add_argument("-f", "--format", choices=FORMATS, help="Output format")
    p.add_argument("-v", "--verbose", action="store_true", default=None, help="Verbose output")
    p.add_argument("-d", "--dry-run", action="store_true", help="Scan and bundle without delivering output")
    p.add_argument(
        "--no-gitignore",
        dest="use_gitignore",
        action="store_false",
        default=None,
        help="Do not apply .gitignore patterns",
    )
    p.add_argument(
        "-t",
        "--show-tree",
        dest="show_file_tree",
        action="store_true",
        default=None,
        help="Include a file tree in the bundle",
    )
    p.add_argument("-m", "--max-size", type=_megabytes, metavar="MB", help="Max file size to include, in MB")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def _deliver(result: BundleResult, ns: argparse.Namespace) -> str:
    """Send the bundle to its destination and return a label for it."""
    if ns.output:
        try:
            ns.output.parent.mkdir(parents=True, exist_ok=True)
            ns.output.write_text(result.output, encoding="utf-8")
        except OSError as e:
            raise OutputError(f"Could not write to output file '{ns.output}': {e}")
        return str(ns.output)
    if ns.stdout:
        sys.stdout.write(result.output)
        sys.stdout.flush()
        return "stdout"
    try:
        pyperclip.copy(result.output)
    except pyperclip.PyperclipException as e:
        raise OutputError(f"Clipboard unavailable: {e}. Use --output or --stdout instead.")
    return "Clipboard"


def run_bundle(argv: Optional[Sequence[str]] = None) -> int:
    ns = _parse_args(argv)
    spinner = Spinner()
    config: Optional[Config] = None
    try:
        spinner.start("Loading config...")
        config = load_config(
            ns.directory,
            {
                "format": ns.format,
                "verbose": ns.verbose,
                "use_gitignore": ns.use_gitignore,
                "show_file_tree": ns.show_file_tree,
                "max_file_size": ns.max_size * MIB if ns.max_size is not None else None,
            },
        )

        spinner.update("Scanning & bundling...")
        result = bundle(ns.directory, config, on_entry=lambda rel: spinner.update(f"Scanning {rel}"))
        spinner.stop()

        if config.verbose:
            render_failures(result)

        if not result.loaded_files:
            render_empty()
            return 0

        if config.verbose:
            render_tree(result.loaded_files)

        if ns.dry_run:
            render_success(result, "Dry Run", dry_run=True)
            return 0

        destination = _deliver(result, ns)
        render_success(result, destination)
        return 0

    except KeyboardInterrupt:
        spinner.fail("Aborted by user.")
        return 130
    except FullsendError as e:
        spinner.fail(str(e))
        return 1
    except Exception as e:
        spinner.fail(f"Unexpected error: {e}")
        if config is not None and config.verbose:
            traceback.print_exc()
        return 1


# Interactive config

def _ask(prompt: str, default: str) -> str:
    answer = input(f"{Fore.CYAN}?{Style.RESET_ALL} {prompt} {Style.DIM}({default}){Style.RESET_ALL} ").strip()
    return answer or default


def _ask_bool(prompt: str, default: bool) -> bool:
    while True:
        answer = _ask(prompt, "Y/n" if default else "y/N").lower()
        if answer == "y/n":
            return default
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        print(f"{Fore.YELLOW}Please answer y or n.{Style.RESET_ALL}")


def _ask_choice(prompt: str, choices: Sequence[str], default: str) -> str:
    while True:
        answer = _ask(f"{prompt} [{'/'.join(choices)}]", default).lower()
        if answer in choices:
            return answer
        print(f"{Fore.YELLOW}Choose one of: {', '.join(choices)}{Style.RESET_ALL}")


def _ask_size_mb(prompt: str, default_bytes: int) -> int:
    while True:
        answer = _ask(prompt, str(default_bytes // MIB))
        if answer.isdigit():
            return int(answer) * MIB
        print(f"{Fore.YELLOW}Enter a whole number of megabytes.{Style.RESET_ALL}")


def run_config() -> int:
    """Prompt for each setting and save the result to ``~/.fullsendrc``."""
    current = load_config_from_disk()
    print(f"\n{Fore.CYAN}fullsend config{Style.RESET_ALL}")
    if current is not None:
        print(f"{Style.DIM}Loaded existing configuration{Style.RESET_ALL}")
    else:
        current = DEFAULT_CONFIG

    try:
        updated = replace(
            current,
            format=_ask_choice("Output format?", FORMATS, current.format),
            show_file_tree=_ask_bool("Include file tree in output?", current.show_file_tree),
            use_gitignore=_ask_bool("Respect .gitignore?", current.use_gitignore),
            max_file_size=_ask_size_mb("Max file size (MB)?", current.max_file_size),
            verbose=_ask_bool("Enable verbose logging?", current.verbose),
        )
    except (KeyboardInterrupt, EOFError):
        print(f"\n{Fore.YELLOW}Cancelled.{Style.RESET_ALL}", file=sys.stderr)
        return 1

    try:
        path = save_config_to_disk(updated)
    except ConfigFileError as e:
        print(f"{Fore.RED}Error: {e}{Style.RESET_ALL}", file=sys.stderr)
        return 1
    print(f"{Fore.GREEN}Saved to {path}{Style.RESET_ALL}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if args[:1] == ["config"]:
        return run_config()
    return run_bundle(args)


if __name__ == "__main__":
    sys.exit(main())
