from pathlib import Path
from typing import List, Union

from .errors import FilesystemError
from .models import VersionEntry

def list_local_versions(root_dir: Union[Path, str]) -> List[VersionEntry]:
    """Every folder under <root>/versions, reported as an installed modded version."""
    versions_dir = Path(root_dir).expanduser() / "versions"
    if not versions_dir.is_dir():
        return []
    try:
        names = [p.name for p in versions_dir.iterdir() if p.is_dir()]
    except OSError as e:
        raise FilesystemError(f"Cannot list {versions_dir}: {e}") from e
    names.sort(key=lambda n: n.lower())
    return [VersionEntry(id=n, type="modded", url=None, available=True) for n in names]
