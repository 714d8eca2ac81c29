from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

@dataclass
class VersionEntry:
    id: str
    type: str
    url: Optional[str] = None       # None for locally installed versions
    available: bool = False

@dataclass
class DownloadInfo:
    url: str
    size: int = 0

@dataclass
class AssetIndex:
    id: str
    url: str = ""

@dataclass
class Artifact:
    path: str
    url: str

@dataclass
class Rule:
    action: str                     # "allow" | "disallow"
    os: Optional[str] = None        # "osx" | "windows" | "linux"

def coordinate_to_path(name: str) -> str:
    """Map a maven coordinate 'group:artifact:version' to its repository path."""
    parts = name.split(":")
    if len(parts) < 3:
        return name
    group, artifact, version = parts[0], parts[1], parts[2]
    return f"{group.replace('.', '/')}/{artifact}/{version}/{artifact}-{version}.jar"

@dataclass
class Library:
    name: str
    artifact: Optional[Artifact] = None
    rules: List[Rule] = field(default_factory=list)

    def relative_path(self) -> str:
        if self.artifact is not None:
            return self.artifact.path
        return coordinate_to_path(self.name)

@dataclass
class VersionDescriptor:
    id: str
    main_class: str
    inherits_from: Optional[str] = None
    client: Optional[DownloadInfo] = None
    asset_index: Optional[AssetIndex] = None
    libraries: List[Library] = field(default_factory=list)

@dataclass
class LaunchPaths:
    root_dir: Path
    version_dir: Path
    libraries_dir: Path
    assets_dir: Path
    version_json: Path
    client_jar: Path

    @property
    def runtime_dir(self) -> Path:
        return self.root_dir / "runtime"

class AccountKind(Enum):
    MICROSOFT = "microsoft"
    OFFLINE = "offline"

@dataclass
class Account:
    username: str
    kind: AccountKind = AccountKind.OFFLINE
    uuid: str = "00000000-0000-0000-0000-000000000000"
    access_token: str = "0"

@dataclass
class LaunchArgs:
    username: str = ""
    uuid: str = "00000000-0000-0000-0000-000000000000"
    access_token: str = "0"

    @classmethod
    def from_account(cls, account: Account) -> "LaunchArgs":
        return cls(username=account.username, uuid=account.uuid,
                   access_token=account.access_token)
