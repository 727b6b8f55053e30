# modsync Output Module
# Rich-based console output

from modsync.output.console import Console

__all__ = ["Console"]
