#!/usr/bin/env python3
"""
pulpmd - Markdown code snippet injector

Create and test your example code, then load it into your markdown pages.
Useful when generating documentation and creating tutorials.

Philosophy:
    - Example code lives in real files that compile and run
    - Markdown pages only reference it: {{snippet name [ext,...]}}
    - Injection is a plain text-to-text pass; the output is ordinary markdown

Directive syntax:
    {{snippet hello}}          every hello.* file, alphabetically
    {{snippet hello [sh,go]}}  hello.sh, then hello.go
    {{snippet intro [md]}}     intro.md spliced in as markdown

    A block quote written directly above a directive is a placeholder for
    "no example yet": it is removed when the directive injects nothing
    (unless --quotes is given), and kept when code is injected below it.

Usage:
    pulpmd --target README.md --injectDir examples/

Examples:
    # Inject into README.md in place, searching examples/ recursively
    pulpmd -t README.md -d examples

    # Write to a different file, keep directive markers for the next run
    pulpmd -t docs/tutorial.src.md -o docs/tutorial.md --notags

    # Filter: only Go and shell files, render .sh as bash
    pulpmd -t README.md -e go,sh:bash

    # Pipe
    cat page.md | pulpmd --stdin -d snippets > page.out.md
"""

import sys
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from pathlib import Path
from typing import List, Optional

from .lib import Injector, __version__, LOG, WARN, state_connectToLogger
from .lib.errors import (
    ConfigError,
    MarkdownParseError,
    OutputWriteError,
    PatternError,
    SnippetReadError,
    SourceReadError,
)
from .config import settings_load
from .models import ProgramState, pipeline
from .models.state import stages_describe


# Define CLI arguments
parser = ArgumentParser(
    prog="pulpmd",
    description="pulpmd - Inject code snippets into markdown files",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--config", default=None, type=str, help="Config file (default is $HOME/.pulpMd.yaml)"
)

parser.add_argument("-t", "--target", default=None, type=str, help="Markdown target file")

parser.add_argument(
    "-s", "--stdin", action="store_true", help="Pass markdown file via stdin"
)

parser.add_argument(
    "-d",
    "--injectDir",
    default=None,
    type=str,
    help="Code directory to source snippets (default: .)",
)

parser.add_argument(
    "-r",
    "--norecur",
    action="store_true",
    default=None,
    help="Don't search injectDir recursively",
)

parser.add_argument(
    "-o",
    "--output",
    default=None,
    type=str,
    help="Output markdown file (default: overwrite target, or stdout with --stdin)",
)

parser.add_argument(
    "-e",
    "--fileExt",
    action="append",
    default=None,
    help="File extensions to inject, comma-separated; 'ext:tag' sets the fence tag",
)

parser.add_argument(
    "-n",
    "--notags",
    action="store_true",
    default=None,
    help="Leave snippet tags in markdown file",
)

parser.add_argument(
    "-q",
    "--quotes",
    action="store_true",
    default=None,
    help="Leave block quote when no code was inserted below it",
)

parser.add_argument(
    "--strict",
    action="store_true",
    default=None,
    help="Abort when a snippet file cannot be read instead of skipping it",
)

parser.add_argument(
    "--lexerTags",
    action="store_true",
    default=None,
    help="Use the Pygments lexer name as fence tag for unmapped extensions",
)

parser.add_argument(
    "--reformat",
    action="store_true",
    default=None,
    help="Normalize the output with mdformat",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def fail(message: str, usage: bool = False) -> None:
    """Print an error (and optionally usage) to stderr and exit 1"""
    if usage:
        parser.print_usage(sys.stderr)
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate options and load settings.

    Returns:
        ProgramState with added fields:
            - settings: AppSettings merged from CLI, env and config file
            - envOK: True if options are consistent

    Exits:
        1 if neither or both of --target and --stdin are given, or the
        config file cannot be loaded
    """
    state = inputstate.copy()
    LOG("Checking options...", level=2)

    if not state.target and not state.stdin:
        fail("'target' or 'stdin' is required", usage=True)
    if state.target and state.stdin:
        fail("'target' and 'stdin' cannot be used simultaneously", usage=True)

    config_file = Path(state.config).expanduser() if state.config else None
    try:
        state.settings = settings_load(
            config_file,
            inject_dir=state.injectDir,
            recursive=False if state.norecur else None,
            extensions=state.fileExt,
            leave_tags=state.notags,
            leave_quotes=state.quotes,
            strict_mode=state.strict,
            lexer_tags=state.lexerTags,
            reformat=state.reformat,
        )
    except ConfigError as e:
        state.envOK = False
        fail(f"cannot load configuration: {e}")

    if config_file is not None:
        LOG(f"Using config file: {config_file}", level=2)
    LOG(f"Inject directory: {state.settings.inject_dir}", level=2)

    state.envOK = True
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the markdown document from --target or stdin.

    Returns:
        ProgramState with added fields:
            - sourceText: Document text
            - sourcePath: Target path (None for stdin)

    Exits:
        1 if the document cannot be read or is not UTF-8
    """
    state = inputstate.copy()

    try:
        if state.stdin:
            state.sourceText = text_decode(sys.stdin.buffer.read(), "<stdin>")
        else:
            state.sourcePath = Path(state.target)
            state.sourceText = text_decode(bytes_read(state.sourcePath), state.sourcePath)
    except SourceReadError as e:
        fail(str(e))

    LOG(f"Read {len(state.sourceText)} characters from {state.sourcePath or '<stdin>'}", level=2)
    return state


def bytes_read(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise SourceReadError(path, e.strerror or str(e)) from e


def text_decode(raw: bytes, origin) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SourceReadError(origin, f"not valid UTF-8 ({e.reason})") from e


def source_parse(inputstate: ProgramState) -> ProgramState:
    """
    Parse the document into a DocumentTree.

    Returns:
        ProgramState with added field:
            - documentTree: Parsed document

    Exits:
        1 if the markdown engine fails
    """
    state = inputstate.copy()

    LOG("Parsing markdown...", level=1)
    try:
        injector = Injector(state.settings)
        state.documentTree = injector.document_parse(
            state.sourceText, path=str(state.sourcePath) if state.sourcePath else None
        )
    except MarkdownParseError as e:
        fail(f"Parse error: {e}")
    return state


def snippets_inject(inputstate: ProgramState) -> ProgramState:
    """
    Inject snippet files at every directive.

    Returns:
        ProgramState with added field:
            - injectReport: InjectReport for the run

    Exits:
        1 on a bad glob pattern, or an unreadable snippet in strict mode
    """
    state = inputstate.copy()

    LOG("Injecting snippets...", level=1)
    try:
        state.injectReport = Injector(state.settings).inject(state.documentTree)
    except (PatternError, SnippetReadError) as e:
        fail(str(e))
    return state


def document_render(inputstate: ProgramState) -> ProgramState:
    """
    Render the edited tree back to markdown.

    Returns:
        ProgramState with added field:
            - renderedText: Final markdown
    """
    state = inputstate.copy()
    state.renderedText = Injector(state.settings).render(state.documentTree)
    return state


def output_write(inputstate: ProgramState) -> ProgramState:
    """
    Write the rendered document in a single write.

    Destination: --output, else the target file, else stdout.

    Returns:
        ProgramState with added field:
            - outputPath: File written (None for stdout)

    Exits:
        1 if the output file cannot be written
    """
    state = inputstate.copy()

    if state.output:
        state.outputPath = Path(state.output)
    elif state.target:
        state.outputPath = Path(state.target)

    if state.outputPath is None:
        sys.stdout.write(state.renderedText)
        sys.stdout.flush()
        return state

    try:
        text_write(state.outputPath, state.renderedText)
    except OutputWriteError as e:
        fail(str(e))
    LOG(f"Wrote {state.outputPath}", level=2)
    return state


def text_write(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(path, e.strerror or str(e)) from e


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Summarize the run on stderr.

    Returns:
        ProgramState unchanged (terminal pipeline stage)
    """
    state: ProgramState = inputstate.copy()
    report = state.injectReport
    if report is None:
        return state

    for path, reason in report.skipped:
        WARN(f"Skipped {path}: {reason}")
    LOG(
        f"✓ {report.directives} directives, {report.fragments} snippets injected"
        f" into {state.outputPath or '<stdout>'}",
        level=1,
    )
    for path in report.injected:
        LOG(f"  {path}", level=2)
    return state


STAGES = [
    env_check,
    source_read,
    source_parse,
    snippets_inject,
    document_render,
    output_write,
    results_report,
]


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point - inject snippets into a markdown document.

    Orchestrates the full pipeline:
        1. env_check: Validate options and load settings
        2. source_read: Read the document from --target or stdin
        3. source_parse: Parse markdown into a document tree
        4. snippets_inject: Resolve directives and splice in snippets
        5. document_render: Render the tree back to markdown
        6. output_write: Write the result
        7. results_report: Display a summary

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        0 on success; failures exit with status 1
    """
    options: Namespace = parser.parse_args(argv)
    state: ProgramState = ProgramState.state_createFromNamespace(options)

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)
    LOG(f"Pipeline: {stages_describe(STAGES)}", level=3)

    pipeline(state, *STAGES)
    return 0


if __name__ == "__main__":
    sys.exit(main())
