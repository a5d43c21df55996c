# backend/settings.py

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, model_validator

# Conventional filenames of the 3-file site
INDEX_FILENAME = "index.html"
STYLE_FILENAME = "style.css"
SCRIPT_FILENAME = "script.js"
OUTPUT_FILENAME = "./singlepage.html"


class CombinerSettings(BaseModel):
    """
    Where the combiner reads from and writes to, and which lines it treats as markers.
    Empty markers are derived from the asset filenames.
    """
    index_path: Path = Path(INDEX_FILENAME)
    style_path: Path = Path(STYLE_FILENAME)
    script_path: Path = Path(SCRIPT_FILENAME)
    output_path: Path = Path(OUTPUT_FILENAME)

    style_marker: str = ""
    script_marker: str = ""

    # "substring": marker anywhere in the line; "line": stripped line equals the marker
    match_mode: Literal["substring", "line"] = "substring"
    debug: bool = False

    @model_validator(mode="after")
    def derive_markers(self) -> "CombinerSettings":
        if not self.style_marker:
            self.style_marker = f'<link rel="stylesheet" href="{self.style_path.as_posix()}" />'
        if not self.script_marker:
            self.script_marker = f'<script src="{self.script_path.as_posix()}"></script>'
        return self


def load_settings() -> CombinerSettings:
    """
    Build settings from SINGLEPAGE_* environment variables (a local .env is honoured).
    Anything unset keeps its default.
    """
    load_dotenv(Path.cwd() / ".env")

    env = {
        "index_path": os.getenv("SINGLEPAGE_INDEX"),
        "style_path": os.getenv("SINGLEPAGE_STYLE"),
        "script_path": os.getenv("SINGLEPAGE_SCRIPT"),
        "output_path": os.getenv("SINGLEPAGE_OUTPUT"),
        "style_marker": os.getenv("SINGLEPAGE_STYLE_MARKER"),
        "script_marker": os.getenv("SINGLEPAGE_SCRIPT_MARKER"),
        "match_mode": os.getenv("SINGLEPAGE_MATCH_MODE"),
        "debug": os.getenv("SINGLEPAGE_DEBUG"),
    }
    return CombinerSettings(**{k: v for k, v in env.items() if v is not None})
