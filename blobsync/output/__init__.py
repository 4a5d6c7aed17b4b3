# blobsync Output Module
# Rich console output and operator interaction

from blobsync.output.console import Console
from blobsync.output.operator import ConsoleOperator, Operator

__all__ = [
    "Console",
    "ConsoleOperator",
    "Operator",
]
