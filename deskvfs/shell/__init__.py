"""
deskvfs Shell Module

Provides the interactive inspection shell:
- Built-in filesystem commands
- Script execution
"""

from .builtins import BuiltinCommands
from .shell import Shell, create_shell

__all__ = [
    'BuiltinCommands',
    'Shell',
    'create_shell',
]
