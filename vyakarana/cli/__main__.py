"""
Vyakarana CLI entry point.

Usage:
    python -m vyakarana.cli classify ā
    python -m vyakarana.cli savarna i ī
    python -m vyakarana.cli scope 1.4.24
    python -m vyakarana.cli resolve kṛ --annotate root=kṛ --annotate prefix=anu
"""

import sys
from .main import main

if __name__ == "__main__":
    sys.exit(main())
