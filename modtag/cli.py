"""CLI entrypoints for modtag commands."""

from __future__ import annotations

import argparse
import io
import sys
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

from .checker import Checker
from .compat import ModverClassifier
from .config import ModtagConfig, load_config
from .discovery import search_upward
from .errors import WARNINGS_EXIT_CODE, MajorBumpRefused, ModtagError, compose_exit_codes
from .git.client import GitClient
from .git.tagger import Tagger
from .logging import configure_logging, get_logger
from .modpath import MANIFEST_NAME
from .models import Result
from .report import describe, describe_all, to_json

_logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_check_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "repodir",
        nargs="?",
        default=None,
        help="Repository root, or any directory inside the module (defaults to current directory).",
    )
    parser.add_argument(
        "moduledir",
        nargs="?",
        default=None,
        help="Module root inside REPODIR; when given, no upward search is done.",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Check every module in the repository.",
    )
    parser.add_argument("--json", action="store_true", help="Output results as JSON.")
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Print warnings only.",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help=f"Exit with status {WARNINGS_EXIT_CODE} if there are warnings.",
    )
    parser.add_argument("--git", default=None, help="Path to the git binary.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .modtag.yml file (defaults to the repository root).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Overall time limit in seconds for external commands.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modtag",
        description="Check Go module version tags and recommend the next release.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Report on module paths, version tags and the default branch.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_check_options(check_parser)

    tag_parser = subparsers.add_parser(
        "tag",
        help="Check, then add any recommended non-major version tag.",
    )
    _add_verbose_option(tag_parser, suppress_default=True)
    _add_check_options(tag_parser)
    tag_parser.add_argument("-m", "--message", default=None, help="Message for the new tag.")
    tag_parser.add_argument(
        "-s",
        "--sign",
        action="store_true",
        default=None,
        help="Sign the new tag.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for modtag commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        code = run(args, stdout=sys.stdout, stderr=sys.stderr)
    except ModtagError as exc:
        parser.exit(1, f"Error: {exc}\nRun with --verbose for more details.\n")
    if code:
        parser.exit(code)


def run(
    args: argparse.Namespace,
    *,
    stdout: TextIO,
    stderr: TextIO,
    checker: Checker | None = None,
    tagger: Tagger | None = None,
) -> int:
    """Execute a parsed command and return the process exit code."""
    repo_dir, module_dir = determine_dirs(args.repodir, args.moduledir, check_all=args.all)
    config = load_config(args.config or repo_dir)

    client = GitClient(args.git or config.git, timeout=args.timeout or config.timeout)
    if checker is None:
        checker = Checker(
            client,
            ModverClassifier(client, config.classifier.command),
            remotes=config.remotes,
            exclude_dirs=config.exclude_dirs,
            workers=config.workers,
        )

    failures: List[str] = []
    if args.all:
        outcome = checker.check_all(repo_dir)
        results = outcome.sorted()
        for subdir in sorted(outcome.errors):
            failures.append(f"checking module {subdir or '.'}: {outcome.errors[subdir]}")
    else:
        results = [checker.check(repo_dir, module_dir)]

    warnings = _render(args, results, stdout)

    codes: List[int] = []
    if args.command == "tag":
        tagger = tagger or Tagger(client, message_template=config.tag.message)
        codes.extend(_add_tags(args, config, tagger, repo_dir, results, stdout, failures))

    for failure in failures:
        stderr.write(f"Error: {failure}\n")

    if args.status and warnings > 0:
        codes.append(WARNINGS_EXIT_CODE)
    code = compose_exit_codes(codes)
    if code == 0 and failures:
        code = 1
    return code


def determine_dirs(
    repodir: Optional[str], moduledir: Optional[str], *, check_all: bool = False
) -> Tuple[Path, Path]:
    """Work out the repository and module directories from the positional args.

    With two arguments both are taken as given. Otherwise the repository (and,
    unless every module is being checked, the module) is found by searching
    upward from the single argument or the current directory.
    """
    if moduledir is not None:
        if check_all:
            raise ModtagError("cannot specify both --all and MODULEDIR")
        return Path(repodir or "."), Path(moduledir)

    start = Path(repodir or ".")
    repo = search_upward(start, ".git")
    if check_all:
        return repo, repo
    return repo, search_upward(start, MANIFEST_NAME)


def _render(args: argparse.Namespace, results: List[Result], stdout: TextIO) -> int:
    if args.json:
        if args.all:
            stdout.write(to_json({result.module_subdir: result for result in results}) + "\n")
        else:
            stdout.write(to_json(results[0]) + "\n")
        return describe_all(results, io.StringIO())
    if args.all:
        return describe_all(results, stdout, quiet=args.quiet)
    return describe(results[0], stdout, quiet=args.quiet)


def _add_tags(
    args: argparse.Namespace,
    config: ModtagConfig,
    tagger: Tagger,
    repo_dir: Path,
    results: List[Result],
    stdout: TextIO,
    failures: List[str],
) -> List[int]:
    sign = config.tag.sign if args.sign is None else bool(args.sign)
    codes: List[int] = []
    for result in results:
        label = result.module_subdir or "."
        try:
            tag = tagger.maybe_add_tag(repo_dir, result, message=args.message, sign=sign)
        except MajorBumpRefused as exc:
            _logger.debug("Major bump refused for %s", label)
            failures.append(f"adding tag to module {label}: {exc}")
            codes.append(exc.code)
            continue
        except ModtagError as exc:
            failures.append(f"adding tag to module {label}: {exc}")
            continue
        if tag is not None and not args.json:
            stdout.write(f"🪄 Added tag {tag}\n")
    return codes


if __name__ == "__main__":
    main(sys.argv[1:])
