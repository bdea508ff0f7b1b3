import asyncio
import sys
from pathlib import Path

from rwcalc.rwcalc_runtime import ExpressionRunner
from rwcalc.rwcalc_config import ConfigError, load_settings
from rwcalc.rwcalc_check import SCENARIOS, VARIABLE_SCENARIOS, run_check
from rwcalc.rwcalc_printer import Printer
from rwcalc.rwcalc_datatypes import EvaluationError

# A basic awaitable input prompt.
async def ainput(prompt: str) -> str:
    loop = asyncio.get_running_loop()
    sys.stdout.write(prompt)
    sys.stdout.flush()
    return await loop.run_in_executor(None, sys.stdin.readline)

def _make_runner() -> ExpressionRunner:
    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
    return ExpressionRunner(settings)

def _report(result, printer: Printer) -> bool:
    """Print a result the way the REPL shows it; returns False on error."""
    if result.status == 'error':
        print(result.format_error(), file=sys.stderr)
        return False
    print(printer.pformat(result.value))
    return True

def run_check_mode() -> int:
    """Run the built-in scenarios and print one report per expression."""
    printer = Printer()
    failures = 0
    batches = [SCENARIOS, VARIABLE_SCENARIOS]
    for batch in batches:
        # Variable scenarios share a runner so bindings carry over between lines.
        runner = _make_runner()
        for expression, expected in batch:
            try:
                report = run_check(runner, expression, expected)
            except EvaluationError as e:
                print(f"s: {expression}")
                print(f"error: {e}")
                failures += 1
                continue
            print(f"s: {report.expression}")
            print(f"answer: {printer.pformat(report.expected)}")
            print(f"result: [{printer.pformat(report.result)}]")
            print(f"correct: {'true' if report.correct else 'false'}")
            if not report.correct:
                failures += 1
    return 1 if failures else 0

def run_expression_file(file_path: str):
    """Evaluate each line of a file and exit with status 1 on the first error."""
    runner = _make_runner()
    printer = Printer()
    p = Path(file_path)
    try:
        source = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Error: file not found: {file_path}", file=sys.stderr)
        raise SystemExit(1)
    for line in source.splitlines():
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        result = runner.handle_expression(line, sink=sys.stderr)
        if not _report(result, printer):
            raise SystemExit(1)

async def main():
    """Run an expression file or the self-check when asked, otherwise start the REPL."""
    if len(sys.argv) > 1:
        arg = sys.argv[1]
        if arg == "--check":
            raise SystemExit(run_check_mode())
        if not arg.startswith("-"):
            run_expression_file(arg)
            return

    print("RWCALC REPL v0.1")
    print("Type 'exit' or press Ctrl+D to quit.")

    runner = _make_runner()
    printer = Printer()

    while True:
        try:
            raw = await ainput(">> ")
            if raw == "":
                raise EOFError
            line = raw.strip()

            if not line:
                continue
            if line == "exit":
                break

            result = runner.handle_expression(line, sink=sys.stderr)
            _report(result, printer)

        except EOFError:
            print("\nExiting.")
            break

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nExiting.")
