# cli.py

"""
Interactive CLI for the quantum operation engine.

Each line is either a shell command or an operation string followed by an
optional rotation expression, e.g. "1H ¼" or "NN" (a half turn).
"""

from qop.config import DEFAULT_CONFIG
from qop.operation import Operation, compiled_op
from qop.parse import parse_integer, parse_rotation
from qop.simulator import Simulator
from qop.state import format_qubit_state

# ANSI colors
COLORS = {
    "reset": "\033[0m",
    "red":   "\033[31m",
    "green": "\033[32m",
    "yellow":"\033[33m",
    "blue":  "\033[34m",
    "magenta":"\033[35m",
    "cyan":  "\033[36m"
}

def color_text(text, color):
    return f"{COLORS.get(color,'reset')}{text}{COLORS['reset']}"

def print_help():
    print(f"""
{color_text('=== Quantum Operation CLI ===','yellow')}

{color_text('Operations','cyan')}
  <op> [rotation]     # e.g. "1H ¼"; default rotation is ½ turn
                      # op symbols: - 0 1 H N X Y (msb first), '#' comment

{color_text('State','cyan')}
  STATE               # show amplitudes as kets
  INFO <op>           # show normalized op, condition and gates
  EXPAND <n>          # grow the state to n qubits
  RESET               # back to the vacuum state

{color_text('Other','cyan')}
  HELP, EXIT
""")

def _split_op(line):
    """Split a line into its operation and rotation text (possibly empty)."""
    parts = line.split(None, 1)
    op = parts[0]
    rest = parts[1].strip() if len(parts) > 1 else ""
    if rest.startswith(("#", "//")):
        rest = ""
    return op, rest

class OperationShell:
    def __init__(self, simulator=None, config=DEFAULT_CONFIG):
        self.config = config
        self.simulator = simulator if simulator is not None else Simulator(config.initial_qubits)

    def describe(self, op: Operation) -> str:
        cond = op.get_condition()
        gates = "".join(g or "-" for g in reversed(op.get_gates()))
        return (f"op={op.op!r} length={op.length} min_length={op.min_length} "
                f"mask={cond.mask:#b} value={cond.value:#b} gates={gates!r}")

    def execute(self, line):
        """Run one line and return the message to show."""
        if not line.split() or line.lstrip().startswith(("#", "//")):
            return ""
        cmd = line.split()[0].upper()
        args = line.split()[1:]

        if cmd == "STATE":
            return format_qubit_state(self.simulator.amplitudes)
        if cmd == "RESET":
            self.simulator.reset()
            return "State reset"
        if cmd == "EXPAND":
            if len(args) != 1:
                raise ValueError("EXPAND requires exactly 1 argument")
            self.simulator.expand_state(parse_integer(args[0]))
            return f"{self.simulator.number_of_qubits} qubit(s)"
        if cmd == "INFO":
            if len(args) != 1:
                raise ValueError("INFO requires exactly 1 operation")
            return self.describe(compiled_op(args[0]))

        op, rotation_text = _split_op(line)
        rotation = parse_rotation(rotation_text) if rotation_text else self.config.default_rotation
        op = self.simulator.apply(op, rotation)
        return f"{op.op or '(phase)'} by {rotation:g} turn(s)"

def interactive_cli(config=DEFAULT_CONFIG):
    shell = OperationShell(config=config)

    print(color_text("Welcome to the Quantum Operation CLI!", "green"))
    print_help()

    while True:
        try:
            inp = input(color_text(">> ", "yellow")).strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not inp:
            continue

        cmd = inp.split()[0].upper()
        if cmd == "EXIT":
            break
        if cmd == "HELP":
            print_help()
            continue

        try:
            print(color_text(shell.execute(inp), "green"))
        except ValueError as e:
            print(color_text(f"Error: {e}", "red"))

if __name__ == "__main__":
    interactive_cli()
