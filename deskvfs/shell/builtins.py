"""
Shell Built-in Commands

Inspection commands over the virtual filesystem. Every command goes
through the public VirtualFileSystem API, the same way the desktop
collaborators do.
"""

from typing import Callable, List, Optional

from deskvfs.filesystem.metadata import format_size
from deskvfs.filesystem.path_resolver import PathResolver


HELP_TEXT = """
deskvfs Shell - Built-in Commands

Navigation:
  ls [path]              List folder contents
  cd [path]              Change folder (default: home)
  pwd                    Print working folder

Files:
  cat <file>             Display file contents
  touch <file>...        Create empty files
  mkdir <folder>...      Create folders
  mv <src> <dest>        Move or rename
  cp <src> <dest>        Copy (folders recursively)
  write <file> <text>... Replace file contents
  stat <path>            Show metadata
  du [path]              Show recursive size
  find <regex> [path]    Find files by name

Trash:
  rm <path>...           Move to Trash (delete for good inside Trash)
  trash                  List Trash entries
  restore <name>         Put a Trash entry back
  empty-trash            Delete everything in the Trash

Engine:
  fsck                   Check tree/index consistency
  help                   Display this help
  exit                   Exit the shell
"""


class BuiltinCommands:
    """
    Built-in shell commands.

    Each command takes its argument list and returns an exit code.
    """

    def __init__(self, shell):
        """
        Initialize built-in commands.

        Args:
            shell: The shell instance
        """
        self._shell = shell
        self._commands: dict[str, Callable[[List[str]], int]] = {
            'help': self.cmd_help,
            'exit': self.cmd_exit,
            'quit': self.cmd_exit,
            'ls': self.cmd_ls,
            'cd': self.cmd_cd,
            'pwd': self.cmd_pwd,
            'cat': self.cmd_cat,
            'touch': self.cmd_touch,
            'mkdir': self.cmd_mkdir,
            'mv': self.cmd_mv,
            'cp': self.cmd_cp,
            'rm': self.cmd_rm,
            'restore': self.cmd_restore,
            'empty-trash': self.cmd_empty_trash,
            'trash': self.cmd_trash,
            'du': self.cmd_du,
            'stat': self.cmd_stat,
            'find': self.cmd_find,
            'write': self.cmd_write,
            'fsck': self.cmd_fsck,
        }

    def get_commands(self) -> dict[str, Callable[[List[str]], int]]:
        """Get all built-in commands."""
        return self._commands

    def is_builtin(self, name: str) -> bool:
        """Check if a command is built-in."""
        return name in self._commands

    def execute(self, name: str, args: List[str]) -> int:
        """
        Execute a built-in command.

        Returns:
            Exit code; 127 for an unknown command
        """
        cmd = self._commands.get(name)
        if cmd is None:
            return 127
        return cmd(args)

    # Helpers

    @property
    def _vfs(self):
        return self._shell.vfs

    def _print(self, text: str = '') -> None:
        self._shell.write(text)

    def _locate(self, raw: str) -> Optional[str]:
        # Resolve raw against cwd; folders may be named without the trailing '/'
        path = self._vfs.resolve_path(self._shell.cwd, raw)
        if self._vfs.exists(path):
            return path
        folder = PathResolver.as_folder(path)
        if self._vfs.exists(folder):
            return folder
        return None

    def _target(self, raw: str) -> tuple[str, str]:
        """(parent folder, name) for a path that may not exist yet."""
        path = self._vfs.resolve_path(self._shell.cwd, raw)
        return PathResolver.split(path.rstrip('/') or '/')

    def _destination(self, src: str, raw_dest: str) -> str:
        # An existing folder as destination means "into it, same name"
        dest_folder = self._locate(raw_dest)
        if dest_folder is not None and PathResolver.is_folder_path(dest_folder):
            return dest_folder + PathResolver.basename(src)
        parent, name = self._target(raw_dest)
        return parent + name

    def _missing(self, cmd: str, raw: str) -> int:
        self._print(f"{cmd}: cannot access '{raw}': No such file or directory")
        return 1

    # Command implementations

    def cmd_help(self, args: List[str]) -> int:
        """Display help information."""
        self._print(HELP_TEXT)
        return 0

    def cmd_exit(self, args: List[str]) -> int:
        """Exit the shell."""
        self._shell.request_exit()
        return 0

    def cmd_ls(self, args: List[str]) -> int:
        """List folder contents."""
        raw = args[0] if args else self._shell.cwd
        path = self._locate(raw)
        if path is None:
            return self._missing('ls', raw)

        if not PathResolver.is_folder_path(path):
            self._print(PathResolver.basename(path))
            return 0

        children = self._vfs.get_children(path)
        for name in sorted(children):
            info = self._vfs.stat(PathResolver.join(path, name, children[name].is_folder))
            display = name + '/' if info['type'] == 'folder' else name
            self._print(f"{info['mode']} {info['owner']:<12} {info['size']:>8} {info['modified']} {display}")
        return 0

    def cmd_cd(self, args: List[str]) -> int:
        """Change folder."""
        raw = args[0] if args else '~'
        path = self._locate(raw)
        if path is None:
            return self._missing('cd', raw)
        if not PathResolver.is_folder_path(path):
            self._print(f"cd: {raw}: Not a directory")
            return 1
        self._shell.cwd = path
        return 0

    def cmd_pwd(self, args: List[str]) -> int:
        """Print working folder."""
        self._print(self._shell.cwd)
        return 0

    def cmd_cat(self, args: List[str]) -> int:
        """Display file contents."""
        if not args:
            self._print("cat: missing operand")
            return 1

        status = 0
        for raw in args:
            path = self._locate(raw)
            if path is None:
                status = self._missing('cat', raw)
                continue
            if PathResolver.is_folder_path(path):
                self._print(f"cat: {raw}: Is a directory")
                status = 1
                continue
            self._print(self._vfs.get_node(path).content.rstrip('\n'))
        return status

    def cmd_touch(self, args: List[str]) -> int:
        """Create empty files; existing files are left alone."""
        if not args:
            self._print("touch: missing file operand")
            return 1

        status = 0
        for raw in args:
            if self._locate(raw) is not None:
                continue
            parent, name = self._target(raw)
            if not self._vfs.touch(parent, name):
                self._print(f"touch: cannot touch '{raw}'")
                status = 1
        return status

    def cmd_mkdir(self, args: List[str]) -> int:
        """Create folders."""
        if not args:
            self._print("mkdir: missing operand")
            return 1

        status = 0
        for raw in args:
            parent, name = self._target(raw)
            if not self._vfs.mkdir(parent, name):
                self._print(f"mkdir: cannot create directory '{raw}'")
                status = 1
        return status

    def _relocate(self, cmd: str, args: List[str], operation: Callable[[str, str], bool]) -> int:
        if len(args) != 2:
            self._print(f"{cmd}: usage: {cmd} <src> <dest>")
            return 1

        src = self._locate(args[0])
        if src is None:
            return self._missing(cmd, args[0])

        dest = self._destination(src, args[1])
        if not operation(src, dest):
            self._print(f"{cmd}: cannot {cmd} '{args[0]}' to '{args[1]}'")
            return 1
        return 0

    def cmd_mv(self, args: List[str]) -> int:
        """Move or rename."""
        return self._relocate('mv', args, self._vfs.move)

    def cmd_cp(self, args: List[str]) -> int:
        """Copy."""
        return self._relocate('cp', args, self._vfs.copy)

    def cmd_rm(self, args: List[str]) -> int:
        """Move entries to the Trash."""
        if not args:
            self._print("rm: missing operand")
            return 1

        status = 0
        for raw in args:
            path = self._locate(raw)
            if path is None:
                status = self._missing('rm', raw)
                continue
            parent, name = PathResolver.split(path.rstrip('/'))
            if not self._vfs.rm(parent, name):
                self._print(f"rm: cannot remove '{raw}'")
                status = 1
        return status

    def cmd_restore(self, args: List[str]) -> int:
        """Put a Trash entry back where it came from."""
        if len(args) != 1:
            self._print("restore: usage: restore <name>")
            return 1
        if not self._vfs.restore(args[0]):
            self._print(f"restore: cannot restore '{args[0]}'")
            return 1
        return 0

    def cmd_empty_trash(self, args: List[str]) -> int:
        """Delete everything in the Trash."""
        if not self._vfs.empty_trash():
            self._print("empty-trash: Trash is already empty")
        return 0

    def cmd_trash(self, args: List[str]) -> int:
        """List Trash entries with their origin."""
        entries = self._vfs.list_trash()
        if not entries:
            self._print("Trash is empty")
            return 0
        for entry in sorted(entries, key=lambda e: e['name']):
            origin = entry['trashed_from'] or '?'
            self._print(f"{entry['name']:<24} {entry['type']:<6} from {origin}{entry['original_name']}")
        return 0

    def cmd_du(self, args: List[str]) -> int:
        """Show recursive size."""
        raw = args[0] if args else self._shell.cwd
        path = self._locate(raw)
        if path is None:
            return self._missing('du', raw)
        self._print(f"{format_size(self._vfs.get_size(path))}\t{path}")
        return 0

    def cmd_stat(self, args: List[str]) -> int:
        """Show metadata."""
        if not args:
            self._print("stat: missing operand")
            return 1
        path = self._locate(args[0])
        if path is None:
            return self._missing('stat', args[0])

        info = self._vfs.stat(path)
        self._print(f"  File: {info['path']}")
        self._print(f"  Type: {info['type']}")
        self._print(f"  Size: {info['size']} ({info['size_display']})")
        self._print(f"Access: {info['mode']}  Owner: {info['owner']}")
        self._print(f"Modify: {info['modified']}")
        if 'entries' in info:
            self._print(f"Entries: {info['entries']}")
        if 'trashed_from' in info:
            self._print(f"Trashed from: {info['trashed_from']}")
        return 0

    def cmd_find(self, args: List[str]) -> int:
        """Find files whose name matches a regex."""
        if not args:
            self._print("find: missing pattern")
            return 1

        start = None
        if len(args) > 1:
            start = self._locate(args[1])
            if start is None:
                return self._missing('find', args[1])

        for path in self._vfs.search(args[0], start):
            self._print(path)
        return 0

    def cmd_write(self, args: List[str]) -> int:
        """Replace file contents, creating the file if needed."""
        if len(args) < 1:
            self._print("write: usage: write <file> <text>...")
            return 1

        raw = args[0]
        path = self._locate(raw)
        if path is None:
            parent, name = self._target(raw)
            if not self._vfs.touch(parent, name):
                self._print(f"write: cannot create '{raw}'")
                return 1
            path = parent + name

        if not self._vfs.write(path, ' '.join(args[1:]) + '\n'):
            self._print(f"write: cannot write '{raw}'")
            return 1
        return 0

    def cmd_fsck(self, args: List[str]) -> int:
        """Check tree/index consistency."""
        errors = self._vfs.check_consistency()
        for error in errors:
            self._print(f"fsck: {error}")
        stats = self._vfs.get_stats()
        self._print(
            f"{stats['entries']} entries ({stats['files']} files, {stats['folders']} folders), "
            f"{len(errors)} problems"
        )
        return 1 if errors else 0
