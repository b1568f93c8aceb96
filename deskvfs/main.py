"""
deskvfs - Virtual Filesystem Engine for a Simulated Desktop

Command-line entry point. Boots the engine, hydrates the bundled
documents and then either opens the inspection shell or runs a
scripted smoke session (--headless).
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from deskvfs.core.bootstrap import Bootstrap
from deskvfs.filesystem.vfs import VirtualFileSystem
from deskvfs.shell.shell import Shell


HEADLESS_SCRIPT = """
pwd
ls
mkdir scratch
touch scratch/a.txt
write scratch/a.txt hello from the smoke run
cat scratch/a.txt
cp scratch scratch-copy
mv scratch-copy/a.txt scratch-copy/b.txt
rm scratch
trash
restore scratch
du
find bible
stat Desktop/readme.md
empty-trash
fsck
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='deskvfs',
        description='Virtual filesystem engine for a simulated desktop'
    )
    parser.add_argument('--config', help='JSON configuration file')
    parser.add_argument('--seed', help='JSON seed tree to start from')
    parser.add_argument('--log-level', help='Override logging.level (DEBUG, INFO, ...)')
    parser.add_argument('--headless', action='store_true', help='Run a scripted smoke session and exit')
    return parser


def hydrate(vfs: VirtualFileSystem) -> int:
    """Run pending hydrations to completion before the shell starts."""
    return asyncio.run(vfs.hydrator.hydrate_all())


def run_headless(vfs: VirtualFileSystem) -> int:
    """
    Exercise the engine through the shell without a terminal.

    Returns:
        0 if every command succeeded and the tree is consistent
    """
    shell = Shell(vfs)
    print("\n=== Running smoke commands ===\n")

    failures = 0
    for line in HEADLESS_SCRIPT.strip().splitlines():
        print(f"$ {line}")
        if shell.execute(line) != 0:
            failures += 1

    print(f"\n=== Smoke run complete: {failures} failed ===\n")
    return 1 if failures or vfs.check_consistency() else 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Sequence:
    1. Load configuration and seed
    2. Initialize logging and the engine
    3. Hydrate bundled documents
    4. Start shell (or smoke run)
    5. Shutdown
    """
    args = build_parser().parse_args(argv)

    bootstrap = Bootstrap(args.config, args.seed)
    result = bootstrap.boot(log_level=args.log_level)
    if not result.success:
        print(f"Boot failed at stage {result.stage.name}")
        print(f"Error: {result.message}")
        return 1

    vfs = bootstrap.engine
    vfs.start()
    hydrate(vfs)

    try:
        if args.headless:
            return run_headless(vfs)
        Shell(vfs).run()
        return 0
    except KeyboardInterrupt:
        print("\n\nInterrupted")
        return 130
    finally:
        bootstrap.shutdown()


if __name__ == '__main__':
    sys.exit(main())
