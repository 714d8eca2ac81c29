from pathlib import Path
from typing import Union

from .errors import FilesystemError
from .models import LaunchPaths

def plan(version_id: str, root_dir: Union[Path, str]) -> LaunchPaths:
    """Lay out where everything for `version_id` lives under `root_dir`. No I/O."""
    root = Path(root_dir)
    version_dir = root / "versions" / version_id
    return LaunchPaths(
        root_dir=root,
        version_dir=version_dir,
        libraries_dir=root / "libraries",
        assets_dir=root / "assets",
        version_json=version_dir / f"{version_id}.json",
        client_jar=version_dir / f"{version_id}.jar",
    )

def ensure_directories(paths: LaunchPaths) -> None:
    for d in (paths.version_dir, paths.libraries_dir, paths.assets_dir):
        try:
            d.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Cannot create {d}: {e}") from e
