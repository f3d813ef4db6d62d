from __future__ import annotations

import sys
from pathlib import Path

# Make the flat modules importable when running pytest from a checkout.
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
