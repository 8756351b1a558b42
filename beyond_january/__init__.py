"""
Beyond January: goal check-ins with a gentle monthly view.
"""

from beyond_january.db import init_db

__version__ = "0.1.0"

__all__ = ["init_db", "__version__"]
