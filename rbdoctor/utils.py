"""General purpose utility functions."""
from pathlib import Path
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing_extensions import NoReturn
else:
    NoReturn = None

def error(msg: str, *args: object) -> NoReturn:
    if args:
        msg = msg%args
    print(msg, file=sys.stderr)
    sys.exit(1)

def resolve_path(path: str) -> Path:
    """
    Parse a given path string to an absolute L{Path} object.
    The path does not need to exist.
    """
    # Relative to the current working dir explicitly, on Windows resolve()
    # does not produce an absolute path for a non-existing path.
    return Path(Path.cwd(), path).resolve()

def parse_path(value: str, opt: str) -> Path:
    """
    Parse a str path to a L{Path} object using L{resolve_path()}.

    Watch out, prints a message and SystemExits on error!
    """
    try:
        return resolve_path(value)
    except Exception as ex:
        error(f"{opt}: invalid path, {ex}.")
