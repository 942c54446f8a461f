from pydantic import BaseModel, Field
from typing import Optional
import os, yaml, pathlib

def _debug_env() -> bool:
    return bool(os.environ.get("DEBUG"))

class ReporterConfig(BaseModel):
    verbose: bool = Field(default_factory=_debug_env, description="Replay captured output of passing tests (DEBUG env var)")
    slow_ms: int = Field(75, ge=0, description="Duration above which a test counts as slow")
    color: Optional[bool] = Field(None, description="Force color on/off; None auto-detects the terminal")
    platform: Optional[str] = Field(None, description="Override sys.platform for glyph selection")
    locations: bool = Field(False, description="Captured output starts with a registration location line")
    log_marker: str = Field(">>> logs: ")

def load_config(path: Optional[str] = None, **overrides) -> ReporterConfig:
    data = {}
    if path:
        data = yaml.safe_load(pathlib.Path(path).read_text()) or {}
    data.update({k: v for k, v in overrides.items() if v is not None})
    return ReporterConfig.model_validate(data)
