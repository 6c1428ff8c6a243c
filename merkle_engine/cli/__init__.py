"""
Merkle Engine Command Line Interface.

This package provides the ``merkle`` command for building trees from files,
generating inclusion proofs and verifying them.
"""

# Import the main CLI entry point
from .main import cli

__all__ = [
    'cli',
]
