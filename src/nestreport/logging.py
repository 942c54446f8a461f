import logging, sys
from rich.console import Console
from rich.logging import RichHandler
def setup_logging(level: str = "INFO"):
    # bind to the real stderr so reporter interception never captures log records
    handler = RichHandler(console=Console(file=sys.stderr), rich_tracebacks=True, show_path=False)
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler])
    return logging.getLogger("nestreport")
