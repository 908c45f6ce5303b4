import shutil
from pathlib import Path
from typing import Optional


def resolve_cmd(cmd: str, cwd: Optional[Path] = None) -> str:
    """
    Resolve an executable name the same way a shell would.

    Paths (anything containing a separator) are resolved against cwd;
    bare names are looked up in PATH.

    Raises:
        FileNotFoundError: If the executable cannot be found
    """
    if "/" in cmd or "\\" in cmd:
        p = Path(cmd)
        if not p.is_absolute() and cwd is not None:
            p = cwd / p
        if p.is_file():
            return str(p.resolve())
    else:
        found = shutil.which(cmd)
        if found:
            return found
    raise FileNotFoundError(
        f"Executable '{cmd}' not found. "
        f"Either provide a path (e.g. './script.sh') or ensure it's in PATH."
    )


def ensure_parent_dir(path: Path) -> Path:
    """Create the parent directory of a file path if it is missing."""
    path.parent.mkdir(parents=True, exist_ok=True)
    return path
