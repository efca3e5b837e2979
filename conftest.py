import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

# Unit tests should be deterministic regardless of a deployment `.env`
# (e.g. a mix mode or working rate tuned for production). Pin the engine
# defaults the tests assume.
os.environ.setdefault("WORKING_SAMPLE_RATE", "24000")
os.environ.setdefault("ASSEMBLE_MIX_MODE", "first")
