"""Command-line interface for jqplay."""

import argparse
import sys
from pathlib import Path
from typing import Optional

from .assistant import ClaudeAssistant, DEFAULT_MODEL
from .editor import EditorSession
from .exceptions import InterpreterUnavailableError, InvalidTransitionError, TransportError
from .interpreter import DEFAULT_TIMEOUT, JqInterpreter
from .models import AWAITING_DECISION
from .patterns import PATTERN_CATALOG
from .renderer import (
    render_attempt,
    render_candidates,
    render_diagnostic,
    render_output,
    render_paths,
    render_patterns,
    render_session,
)
from .session import DEFAULT_MAX_ATTEMPTS, run_generation


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="jqplay",
        description="Evaluate, complete and generate jq scripts",
        epilog="""
Examples:
  jqplay run '.users[] | .name' -i data.json     Evaluate a script
  jqplay complete '.users[] | sel' -i data.json  Ranked completions
  jqplay paths -i data.json                      JSON paths and selectors
  jqplay patterns -c Filtering                   Browse the snippet catalog
  jqplay gen -i data.json -d want.json           Generate a script with Claude
  jqplay help                                    Show detailed help

Generation requires ANTHROPIC_API_KEY environment variable.
""",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--jq",
        metavar="PATH",
        help="jq executable (default: $JQPLAY_JQ or jq)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="Seconds before a jq run is abandoned"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Evaluate a script against JSON input"
    )
    run_parser.add_argument("script", help="jq script")
    run_parser.add_argument(
        "-i", "--input",
        metavar="FILE",
        help="Input JSON file (default: stdin)"
    )

    # complete command
    complete_parser = subparsers.add_parser(
        "complete",
        help="Show completion candidates for partial script text"
    )
    complete_parser.add_argument("text", help="Script text typed so far")
    complete_parser.add_argument(
        "-i", "--input",
        metavar="FILE",
        help="Sample JSON file providing field suggestions"
    )
    complete_parser.add_argument(
        "--cursor",
        type=int,
        metavar="N",
        help="Cursor offset into TEXT (default: end)"
    )
    complete_parser.add_argument(
        "-n", "--limit",
        type=int,
        default=15,
        help="Number of candidates to show"
    )

    # paths command
    paths_parser = subparsers.add_parser(
        "paths",
        help="List the JSON paths of a sample"
    )
    paths_parser.add_argument(
        "-i", "--input",
        metavar="FILE",
        help="Input JSON file (default: stdin)"
    )

    # patterns command
    patterns_parser = subparsers.add_parser(
        "patterns",
        help="List the snippet catalog"
    )
    patterns_parser.add_argument(
        "-c", "--category",
        help="Only show one category"
    )

    # gen command
    gen_parser = subparsers.add_parser(
        "gen",
        help="Generate a script that turns the input into the desired output"
    )
    gen_parser.add_argument(
        "-i", "--input",
        metavar="FILE",
        required=True,
        help="Input JSON file"
    )
    gen_parser.add_argument(
        "-d", "--desired",
        metavar="FILE",
        required=True,
        help="Desired output JSON file"
    )
    gen_parser.add_argument(
        "-e", "--extra",
        metavar="TEXT",
        help="Additional instructions for the assistant"
    )
    gen_parser.add_argument(
        "--max-attempts",
        type=int,
        default=DEFAULT_MAX_ATTEMPTS,
        help=f"Stop offering to continue after N attempts (default: {DEFAULT_MAX_ATTEMPTS})"
    )
    gen_parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Continue after every invalid attempt without asking"
    )
    gen_parser.add_argument(
        "--model",
        default=DEFAULT_MODEL,
        help="Claude model for generation"
    )

    # help command
    subparsers.add_parser(
        "help",
        help="Show detailed help"
    )

    args = parser.parse_args(argv)

    # Handle subcommands
    if args.command == "run":
        return cmd_run(args)
    elif args.command == "complete":
        return cmd_complete(args)
    elif args.command == "paths":
        return cmd_paths(args)
    elif args.command == "patterns":
        return cmd_patterns(args)
    elif args.command == "gen":
        return cmd_gen(args)
    elif args.command == "help":
        return cmd_help()
    else:
        parser.print_help()
        return 0


def cmd_run(args) -> int:
    """Evaluate a script."""
    editor = _make_editor(args)
    sample = _read_input(args.input)
    if sample is None:
        return 1
    editor.set_sample(sample)
    editor.edit(args.script)

    try:
        evaluation = editor.evaluate()
    except ValueError as e:
        print(f"Error: Input is not valid JSON: {e}", file=sys.stderr)
        return 1

    if evaluation.ok:
        print(render_output(evaluation.result))
        return 0

    print(render_diagnostic(evaluation.diagnostic, args.script), file=sys.stderr)
    return 1


def cmd_complete(args) -> int:
    """Show ranked completion candidates."""
    editor = _make_editor(args)
    if args.input:
        sample = _read_input(args.input)
        if sample is None:
            return 1
        editor.set_sample(sample)

    candidates = editor.edit(args.text, args.cursor)
    print(render_candidates(candidates, limit=args.limit))
    return 0


def cmd_paths(args) -> int:
    """List JSON paths of a sample."""
    editor = _make_editor(args)
    sample = _read_input(args.input)
    if sample is None:
        return 1
    editor.set_sample(sample)
    print(render_paths(editor.json_paths))
    return 0


def cmd_patterns(args) -> int:
    """List the snippet catalog."""
    print(render_patterns(PATTERN_CATALOG, category=args.category))
    return 0


def cmd_gen(args) -> int:
    """Generate a script with Claude, offering retries on failure."""
    if args.input == "-" and args.desired == "-":
        print("Error: Only one of --input and --desired can be read from stdin", file=sys.stderr)
        return 1

    editor = _make_editor(args, max_attempts=args.max_attempts)
    sample = _read_input(args.input)
    desired = _read_input(args.desired)
    if sample is None or desired is None:
        return 1
    editor.set_sample(sample)

    try:
        session = editor.open_synthesis(desired, extra_instructions=args.extra)
    except ValueError as e:
        print(f"Error: Input and desired output must be valid JSON: {e}", file=sys.stderr)
        return 1

    assistant = ClaudeAssistant(model=args.model)

    while True:
        try:
            attempt = run_generation(session, assistant, editor.interpreter)
        except (TransportError, InterpreterUnavailableError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        print(render_attempt(attempt), file=sys.stderr)

        if session.state != AWAITING_DECISION:
            break
        if not session.can_continue:
            print(f"Reached {args.max_attempts} attempts", file=sys.stderr)
            session.request_break()
            break
        if args.yes or _confirm("Continue with Claude?"):
            print(f"Retrying with {len(session.attempts)} previous attempt(s)...", file=sys.stderr)
            continue
        try:
            session.request_break()
        except InvalidTransitionError as e:
            print(f"Error: {e}", file=sys.stderr)
        break

    print(render_session(session), file=sys.stderr)

    if editor.apply_resolved_script():
        print(editor.document.text)
        return 0
    return 1


def cmd_help() -> int:
    """Show detailed help."""
    help_text = """
JQPLAY - Diagnostics, completions and generation for jq scripts

COMMANDS
  jqplay run SCRIPT [options]      Evaluate SCRIPT against JSON input
  jqplay complete TEXT [options]   Ranked completions for partial TEXT
  jqplay paths [options]           JSON paths and jq selectors of a sample
  jqplay patterns [options]        Browse the snippet catalog
  jqplay gen [options]             Generate a script with Claude
  jqplay help                      Show this help

GLOBAL OPTIONS
  --jq PATH            jq executable (default: $JQPLAY_JQ or jq)
  --timeout SECONDS    Abandon a jq run after this long (default: 10)

RUN OPTIONS
  -i, --input FILE     Input JSON (default: stdin)

COMPLETE OPTIONS
  -i, --input FILE     Sample JSON for field suggestions
  --cursor N           Cursor offset into TEXT (default: end of TEXT)
  -n, --limit N        Number of candidates to show (default: 15)

GEN OPTIONS
  -i, --input FILE     Input JSON
  -d, --desired FILE   Desired output JSON
  -e, --extra TEXT     Additional instructions for the assistant
  --max-attempts N     Attempt limit (default: 5)
  -y, --yes            Keep retrying without asking
  --model MODEL        Claude model (default: claude-sonnet-4-20250514)

DIAGNOSTICS
  Syntax error         Malformed script, caret under the offending part
  Type error           Operands of incompatible types, caret under the literal
  Environment error    jq is not installed or could not be started
  Error                Anything jq reported that could not be classified

SCORES (in complete)
  0                    Field from your own data
  lower is better      Snippets start at 500, context deducts from it

EXAMPLES
  echo '{"a": 1}' | jqplay run '.a + 1'
  jqplay complete '.items[] | select(' -i data.json
  jqplay gen -i data.json -d want.json -e "keep the original order"

ENVIRONMENT
  ANTHROPIC_API_KEY    Required for gen. Your Anthropic API key.
  JQPLAY_JQ            Path to the jq executable.
"""
    print(help_text)
    return 0


def _make_editor(args, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> EditorSession:
    interpreter = JqInterpreter(jq_path=args.jq, timeout=args.timeout)
    return EditorSession(interpreter=interpreter, max_attempts=max_attempts)


def _read_input(path: Optional[str]) -> Optional[str]:
    """Read JSON text from a file, or stdin when no path is given."""
    if not path or path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: Could not read {path}: {e}", file=sys.stderr)
        return None


def _confirm(question: str) -> bool:
    try:
        answer = input(f"{question} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


if __name__ == "__main__":
    sys.exit(main())
