"""
askbase Tools Module
====================
Command-line tools.
"""

from .cli import CLIController, main as cli_main

__all__ = [
    'CLIController',
    'cli_main'
]
