"""
Paths and endpoints, overridable from the environment or a .env file.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

ROOT_DIR = Path(__file__).parent.parent

DATA_DIR    = Path(os.getenv("GRADES_DATA_DIR", ROOT_DIR / "data"))
RAW_DIR     = Path(os.getenv("GRADES_RAW_DIR", DATA_DIR / "raw"))
GRADES_FILE = DATA_DIR / "grades.json"
LOG_DIR     = Path(os.getenv("GRADES_LOG_DIR", ROOT_DIR / "logs"))

API_URL = os.getenv("GRADES_API_URL", "http://localhost:8000").rstrip("/")
