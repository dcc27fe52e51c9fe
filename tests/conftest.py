import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep tests deterministic: no rate limiting, no real AI credentials.
os.environ["RATE_LIMIT_ENABLED"] = "0"
os.environ["OPENAI_API_KEY"] = ""
os.environ.setdefault("LOG_LEVEL", "WARNING")
