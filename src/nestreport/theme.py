from dataclasses import dataclass, field
from typing import Dict, Optional
import sys

RULE_WIDTH = 46

# Style names follow the classic mocha reporter palette.
BASE_STYLES: Dict[str, str] = {
    "suite": "magenta",
    "checkmark": "green",
    "pass": "bright_black",
    "fail": "red",
    "pending": "cyan",
    "pending_symbol": "yellow",
    "fast": "bright_black",
    "medium": "yellow",
    "slow": "red",
    "green": "green",
    "location": "cyan",
    "log_marker": "blue",
    "took": "bright_black",
    "duration": "bold magenta",
}

@dataclass(frozen=True)
class PresentationTheme:
    ok_symbol: str
    pending_symbol: str
    top_rule: str
    bottom_rule: str
    styles: Dict[str, str] = field(default_factory=lambda: dict(BASE_STYLES))

    def style(self, name: str) -> str:
        return self.styles.get(name, name)

def theme_for_platform(platform: Optional[str] = None) -> PresentationTheme:
    platform = platform or sys.platform
    if platform == "win32":
        # magenta alone is hard to read on the default Windows console
        styles = dict(BASE_STYLES, suite="bold magenta")
        return PresentationTheme("@", "?", "=" * RULE_WIDTH, "=" * RULE_WIDTH, styles)
    return PresentationTheme("✔", "⌗", "▀" * RULE_WIDTH, "▄" * RULE_WIDTH)
