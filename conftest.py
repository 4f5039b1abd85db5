"""Root pytest configuration.

Loads env files the same way main.py does and makes the root main.py
importable from the web API tests.
"""

import sys
from pathlib import Path

from dotenv import load_dotenv

_root = Path(__file__).parent
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

# .env.local wins over .env, matching main.py
load_dotenv(_root / ".env.local")
load_dotenv(_root / ".env")
