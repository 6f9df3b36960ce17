# Ensure the `backend` directory is importable so `from voicedoc.*` works
# without installing the package.
from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT_DIR))

# Keep test runs from writing logs into the source tree or reading a developer
# .env pointing at a real Ollama.
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "voicedoc-test-logs"))
os.environ.setdefault("OLLAMA_URL", "http://ollama.test:11434")
os.environ.setdefault("MODEL_NAME", "mistral")
