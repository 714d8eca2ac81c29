from __future__ import annotations

import logging
import os
import tarfile
import zipfile
from pathlib import Path
from typing import Optional, Tuple

import httpx

from .errors import ArchiveError, FilesystemError, NetworkError, UnsupportedPlatform
from .models import Library
from .utils import current_os, current_platform

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────────────────────────────────────
# Java runtime table
# ──────────────────────────────────────────────────────────────────────────────

_TEMURIN = "https://github.com/adoptium/temurin21-binaries/releases/download/jdk-21.0.2%2B13"

RUNTIME_URLS = {
    ("osx", "arm64"): f"{_TEMURIN}/OpenJDK21U-jdk_aarch64_mac_hotspot_21.0.2_13.tar.gz",
    ("osx", "x86_64"): f"{_TEMURIN}/OpenJDK21U-jdk_x64_mac_hotspot_21.0.2_13.tar.gz",
    ("windows", "x86_64"): f"{_TEMURIN}/OpenJDK21U-jdk_x64_windows_hotspot_21.0.2_13.zip",
    ("linux", "x86_64"): f"{_TEMURIN}/OpenJDK21U-jdk_x64_linux_hotspot_21.0.2_13.tar.gz",
}

# Where the java binary sits inside the extracted archive; tied to the release above.
RUNTIME_EXECUTABLES = {
    "osx": "jdk-21.0.2+13/Contents/Home/bin/java",
    "windows": "jdk-21.0.2+13/bin/java.exe",
    "linux": "jdk-21.0.2+13/bin/java",
}

def resolve_runtime_url(os_name: Optional[str], arch: Optional[str]) -> str:
    try:
        return RUNTIME_URLS[(os_name, arch)]
    except KeyError:
        raise UnsupportedPlatform(f"No Java runtime download for {os_name}/{arch}.") from None

def runtime_executable(os_name: Optional[str] = None) -> str:
    os_name = os_name or current_os()
    try:
        return RUNTIME_EXECUTABLES[os_name]
    except KeyError:
        raise UnsupportedPlatform(f"No Java runtime layout for {os_name}.") from None

# ──────────────────────────────────────────────────────────────────────────────
# Downloads
# ──────────────────────────────────────────────────────────────────────────────

async def download(url: str, dest: Path, *, client: httpx.AsyncClient) -> None:
    """Stream `url` into `dest`, replacing whatever is there."""
    dest = Path(dest)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Cannot create {dest.parent}: {e}") from e

    logger.info("Downloading %s -> %s", url, dest)
    try:
        async with client.stream("GET", url) as response:
            response.raise_for_status()
            with open(dest, "wb") as fh:
                async for chunk in response.aiter_bytes():
                    fh.write(chunk)
    except httpx.HTTPError as e:
        _discard(dest)
        raise NetworkError(f"Failed to download {url}: {e}") from e
    except OSError as e:
        _discard(dest)
        raise FilesystemError(f"Failed to write {dest}: {e}") from e

def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove partial file %s: %s", path, e)

# ──────────────────────────────────────────────────────────────────────────────
# Library rules
# ──────────────────────────────────────────────────────────────────────────────

def should_include(library: Library, os_name: Optional[str] = None) -> bool:
    """Decide whether `library` belongs on this platform.

    No rules means always. Otherwise the first "allow" rule naming a different
    OS vetoes the library, regardless of any later rule that would allow it.
    Rules without an OS and "disallow" rules do not take part.
    """
    if not library.rules:
        return True
    os_name = os_name or current_os()
    for rule in library.rules:
        if rule.os is None:
            continue
        if rule.action == "allow" and rule.os != os_name:
            return False
    return True

# ──────────────────────────────────────────────────────────────────────────────
# Java runtime
# ──────────────────────────────────────────────────────────────────────────────

def locate_runtime(search_dir: Path, os_name: Optional[str] = None) -> Optional[Path]:
    """Expected java binary under `search_dir/runtime/`, if the file is there."""
    java = Path(search_dir) / "runtime" / runtime_executable(os_name)
    return java if java.exists() else None

def _extract(archive: Path, dest: Path) -> None:
    try:
        if archive.name.endswith(".zip"):
            with zipfile.ZipFile(archive) as zf:
                zf.extractall(dest)
        else:
            with tarfile.open(archive, "r:gz") as tf:
                tf.extractall(dest, filter="data")
    except (tarfile.TarError, zipfile.BadZipFile, EOFError) as e:
        raise ArchiveError(f"Cannot extract {archive.name}: {e}") from e
    except OSError as e:
        raise FilesystemError(f"Cannot extract into {dest}: {e}") from e

async def provision_runtime(
    install_dir: Path,
    *,
    client: httpx.AsyncClient,
    platform: Optional[Tuple[Optional[str], Optional[str]]] = None,
) -> Path:
    """Download and unpack a Java runtime into `install_dir`; return the java binary."""
    os_name, arch = platform or current_platform()
    url = resolve_runtime_url(os_name, arch)
    install_dir = Path(install_dir)
    try:
        install_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Cannot create {install_dir}: {e}") from e

    suffix = ".zip" if url.endswith(".zip") else ".tar.gz"
    archive = install_dir.parent / f"runtime_temp{suffix}"
    try:
        await download(url, archive, client=client)
        logger.info("Extracting Java runtime into %s", install_dir)
        _extract(archive, install_dir)
    finally:
        _discard(archive)

    java = install_dir / runtime_executable(os_name)
    if not java.exists():
        raise ArchiveError(f"Java binary missing after extraction: {java}")

    if os_name != "windows":
        try:
            os.chmod(java, 0o755)
        except OSError as e:
            raise FilesystemError(f"Cannot mark {java} executable: {e}") from e
    return java
