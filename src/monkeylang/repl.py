"""Interactive Monkey shell. Uses cmd as backend."""

import cmd
import logging
from typing import Optional

from termcolor import colored

from .config import InterpreterConfig
from .errors import NESTING_ERROR, render_diagnostic, render_error
from .runtime import Environment, run

logger = logging.getLogger(__name__)


class Shell(cmd.Cmd):
    """Monkey interpreter shell.

    Every line is lexed, parsed and evaluated in one Environment that lives
    as long as the shell, so ``let`` bindings carry over between lines.
    """
    intro = "Monkey interpreter\nType 'help' for commands, 'exit' or Ctrl-D to leave."
    prompt = ">> "

    def __init__(self, config: Optional[InterpreterConfig] = None,
                 env: Optional[Environment] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config if config is not None else InterpreterConfig()
        self.prompt = self.config.prompt
        self.env = env if env is not None else Environment()
        self.line_num = 0

    def _print_error(self, message: str) -> None:
        print(render_error(message, self.config.color), file=self.stdout)

    def default(self, line):
        """Evaluates a line of Monkey source."""
        self.line_num += 1
        try:
            result = run(line, self.env, filename="<stdin>",
                         max_errors=self.config.max_errors)
        except RecursionError:  # cmd.Cmd would otherwise exit on the exception
            self._print_error(NESTING_ERROR)
            return

        if result.diagnostics:
            logger.debug("line %d: %d syntax error(s)", self.line_num, len(result.diagnostics))
            for diag in result.diagnostics:
                print(render_diagnostic(diag, self.config.color), file=self.stdout)
            return

        text = result.value.inspect()
        if result.is_error and self.config.color:
            text = colored(text, "red")
        print(text, file=self.stdout)

    def do_env(self, arg):
        """Lists the current bindings."""
        bindings = self.env.bindings()
        if not bindings:
            print("(no bindings)", file=self.stdout)
            return
        for name, value in sorted(bindings.items()):
            print(f"{name} = {value.inspect()}", file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
