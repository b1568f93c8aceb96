"""
deskvfs Shell Module

An interactive shell for inspecting and driving the virtual
filesystem from a terminal.
"""

import shlex
import sys
from typing import Optional, TextIO

from deskvfs.filesystem.vfs import VirtualFileSystem
from deskvfs.logger import get_logger

from .builtins import BuiltinCommands


class Shell:
    """
    deskvfs Interactive Shell.

    Provides:
    - shlex-style word splitting and quoting
    - Built-in filesystem commands
    - Scripts (one command per line, '#' comments)

    Example:
        >>> shell = Shell(vfs)
        >>> shell.execute('ls ~/Desktop')
        0
    """

    def __init__(self, vfs: VirtualFileSystem, out: Optional[TextIO] = None):
        self._vfs = vfs
        self._out = out
        self._logger = get_logger('shell')
        self._builtins = BuiltinCommands(self)
        self._running = False
        self._exiting = False
        self._cwd = vfs.home
        self._user = vfs.config.filesystem.owner
        self._last_status = 0

    @property
    def vfs(self) -> VirtualFileSystem:
        return self._vfs

    @property
    def cwd(self) -> str:
        return self._cwd

    @cwd.setter
    def cwd(self, value: str):
        self._cwd = value

    @property
    def last_status(self) -> int:
        return self._last_status

    @property
    def exiting(self) -> bool:
        return self._exiting

    def write(self, text: str) -> None:
        """Write one line of output."""
        out = self._out if self._out is not None else sys.stdout
        out.write(text + '\n')

    def run(self) -> None:
        """
        Run the interactive shell.

        This is the main REPL loop; it ends on 'exit' or end of input.
        """
        self._running = True
        self.write(f"deskvfs shell on {self._vfs.home}")
        self.write("Type 'help' for a list of commands.\n")

        while self._running and not self._exiting:
            try:
                line = input(self._get_prompt())
            except EOFError:
                self.write('')
                break
            except KeyboardInterrupt:
                self.write("^C")
                continue

            self.execute(line)

        self._running = False

    def _get_prompt(self) -> str:
        home = self._vfs.home
        if self._cwd.startswith(home):
            cwd_display = '~/' + self._cwd[len(home):].rstrip('/') if self._cwd != home else '~'
        else:
            cwd_display = self._cwd
        return f"{self._user}@Debian:{cwd_display}$ "

    def execute(self, line: str) -> int:
        """
        Execute a command line.

        Returns:
            Exit code; 2 for a syntax error, 127 for an unknown command
        """
        line = line.strip()
        if not line or line.startswith('#'):
            return 0

        try:
            words = shlex.split(line)
        except ValueError as e:
            self.write(f"shell: syntax error: {e}")
            self._last_status = 2
            return 2

        command, args = words[0], words[1:]
        if not self._builtins.is_builtin(command):
            self.write(f"{command}: command not found")
            self._last_status = 127
            return 127

        self._logger.debug("Executing", context={'command': command, 'args': len(args)})
        self._last_status = self._builtins.execute(command, args)
        return self._last_status

    def run_script(self, script: str) -> int:
        """
        Run a script (multiple commands).

        Stops early on 'exit'.

        Returns:
            Last exit code
        """
        exit_code = 0
        for line in script.splitlines():
            exit_code = self.execute(line)
            if self._exiting:
                break
        return exit_code

    def request_exit(self) -> None:
        """Request the shell to exit."""
        self._exiting = True

    def stop(self) -> None:
        """Stop the shell."""
        self._running = False


def create_shell(vfs: VirtualFileSystem, out: Optional[TextIO] = None) -> Shell:
    """Factory function to create a shell."""
    return Shell(vfs, out)
