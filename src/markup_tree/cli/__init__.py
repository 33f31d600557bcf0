"""Command-line interface for the markup tree codec.

Converts markup files to JSON trees and back from the shell.
"""

from .main import main

__all__ = ["main"]
