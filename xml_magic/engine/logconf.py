# engine/logconf.py
import logging, sys

FORMAT = "%(asctime)s | %(levelname)-5s | %(module)s | %(message)s"

def init(level: str = "WARNING"):
    """Configure root logger once per run. Stdout is reserved for output."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
