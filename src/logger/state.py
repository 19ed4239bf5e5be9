from __future__ import annotations

from pathlib import Path
from typing import Optional

from retention import RetentionMixin

INITIALIZED: bool = False
LOG_DIR: Optional[Path] = None
LOG_FILE_PATH: Optional[Path] = None
FILE_HANDLER: Optional[RetentionMixin] = None
