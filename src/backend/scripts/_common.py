"""
Common utilities for backend scripts.

Puts the backend root on sys.path so scripts can be run directly
(python scripts/seed_posts.py) as well as as modules
(python -m scripts.seed_posts).

Usage:
    import scripts._common  # noqa: F401
    # Now you can import from core, db, models, services, etc.
"""

import sys
from pathlib import Path

BACKEND_ROOT = Path(__file__).parent.parent
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))
