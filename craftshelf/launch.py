# craftshelf/launch.py
from __future__ import annotations

import logging
import subprocess
import threading
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

import httpx

from .errors import LauncherError, ResolutionError
from .models import Account, LaunchArgs, LaunchPaths, VersionDescriptor, VersionEntry
from .paths import ensure_directories, plan
from .repository import download, locate_runtime, provision_runtime, should_include
from .resolver import resolve
from .utils import classpath_separator, current_os, is_windows

logger = logging.getLogger(__name__)

class LaunchState(Enum):
    PLANNED = "planned"
    METADATA_RESOLVED = "metadata_resolved"
    DEPENDENCIES_READY = "dependencies_ready"
    CLASSPATH_BUILT = "classpath_built"
    RUNTIME_READY = "runtime_ready"
    SPAWNED = "spawned"

# ──────────────────────────────────────────────────────────────────────────────
# Stages
# ──────────────────────────────────────────────────────────────────────────────

async def prepare_dependencies(
    descriptor: VersionDescriptor,
    paths: LaunchPaths,
    *,
    client: httpx.AsyncClient,
    os_name: Optional[str] = None,
) -> int:
    """Fetch the client jar and every applicable library that is not on disk yet.

    Returns the number of downloads performed; a fully cached install returns 0.
    """
    downloaded = 0

    if not paths.client_jar.exists():
        if descriptor.client is None:
            raise ResolutionError(f"No client download for {descriptor.id}.")
        await download(descriptor.client.url, paths.client_jar, client=client)
        downloaded += 1
    else:
        logger.debug("Client jar cached at %s", paths.client_jar)

    for lib in descriptor.libraries:
        if not should_include(lib, os_name):
            continue
        if lib.artifact is None:
            # nothing to fetch; the derived path still goes on the classpath
            continue
        lib_path = paths.libraries_dir / lib.artifact.path
        if lib_path.exists():
            logger.debug("Library cached: %s", lib.name)
            continue
        await download(lib.artifact.url, lib_path, client=client)
        downloaded += 1

    return downloaded

def build_classpath(
    descriptor: VersionDescriptor,
    paths: LaunchPaths,
    os_name: Optional[str] = None,
) -> str:
    entries = [str(paths.client_jar)]
    for lib in descriptor.libraries:
        if not should_include(lib, os_name):
            continue
        entries.append(str(paths.libraries_dir / lib.relative_path()))
    return classpath_separator(os_name).join(entries)

async def get_runtime(
    paths: LaunchPaths,
    *,
    client: httpx.AsyncClient,
    java_path: Optional[str] = None,
) -> Path:
    """Configured java first, then one under the root, else install one there."""
    if java_path and Path(java_path).is_file():
        return Path(java_path)
    found = locate_runtime(paths.root_dir)
    if found is not None:
        return found
    logger.info("No Java runtime under %s, provisioning one", paths.root_dir)
    return await provision_runtime(paths.runtime_dir, client=client)

def build_command(
    java: Union[Path, str],
    paths: LaunchPaths,
    descriptor: VersionDescriptor,
    classpath: str,
    version_id: str,
    args: LaunchArgs,
    allocated_ram: int = 2048,
    os_name: Optional[str] = None,
) -> List[str]:
    os_name = os_name or current_os()
    argv: List[str] = [str(java)]
    if os_name == "osx":
        argv.append("-XstartOnFirstThread")

    asset_index = descriptor.asset_index.id if descriptor.asset_index else "legacy"

    argv += [
        f"-Xmx{allocated_ram}M",
        "-cp", classpath,
        descriptor.main_class,
        "--version", version_id,
        "--gameDir", ".",
        "--assetsDir", str(paths.assets_dir),
        "--assetIndex", asset_index,
        "--username", args.username,
        "--uuid", args.uuid,
        "--accessToken", args.access_token,
        "--userType", "legacy",
    ]
    return argv

def _spawn(argv: List[str], cwd: Path) -> Tuple[bool, str]:
    """
    Start the game detached; the launch never waits on it or reads its output.
    A daemon thread reaps the child so it does not linger as a zombie.
    """
    kwargs = {}
    if is_windows():
        kwargs["creationflags"] = getattr(subprocess, "DETACHED_PROCESS", 0)
    else:
        kwargs["start_new_session"] = True
    try:
        p = subprocess.Popen(argv, cwd=str(cwd), shell=False, **kwargs)
    except (OSError, ValueError, TypeError) as e:
        return False, f"Spawn error: {e}"

    # Only reap if the object looks like a real Popen (has .wait())
    if hasattr(p, "wait"):
        threading.Thread(target=p.wait, daemon=True).start()
    return True, "Launched."

# ──────────────────────────────────────────────────────────────────────────────
# Public API
# ──────────────────────────────────────────────────────────────────────────────

async def _run(
    version: VersionEntry,
    args: LaunchArgs,
    root_dir: Path,
    allocated_ram: int,
    java_path: Optional[str],
    client: httpx.AsyncClient,
) -> Tuple[bool, str]:
    paths = plan(version.id, root_dir)
    ensure_directories(paths)
    logger.info("[%s] %s", version.id, LaunchState.PLANNED.value)

    descriptor = await resolve(version.id, version.available, version.url, paths, client=client)
    logger.info("[%s] %s (%d libraries)", version.id,
                LaunchState.METADATA_RESOLVED.value, len(descriptor.libraries))

    count = await prepare_dependencies(descriptor, paths, client=client)
    logger.info("[%s] %s (%d downloaded)", version.id, LaunchState.DEPENDENCIES_READY.value, count)

    classpath = build_classpath(descriptor, paths)
    logger.info("[%s] %s", version.id, LaunchState.CLASSPATH_BUILT.value)

    java = await get_runtime(paths, client=client, java_path=java_path)
    logger.info("[%s] %s (%s)", version.id, LaunchState.RUNTIME_READY.value, java)

    argv = build_command(java, paths, descriptor, classpath, version.id, args, allocated_ram)
    ok, msg = _spawn(argv, paths.root_dir)
    if ok:
        logger.info("[%s] %s", version.id, LaunchState.SPAWNED.value)
    return ok, msg

async def launch(
    version: VersionEntry,
    account: Optional[Account],
    root_dir: Union[Path, str],
    *,
    allocated_ram: int = 2048,
    java_path: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Tuple[bool, str]:
    """
    Resolve, download and start `version` for `account`.

    Returns (ok, message). Nothing is raised for launch failures; whatever was
    downloaded before a failure stays cached for the next attempt.
    """
    if account is None:
        logger.info("Launch of %s ignored: no active account", version.id)
        return False, "No active account."

    args = LaunchArgs.from_account(account)
    own_client = client is None
    if own_client:
        client = httpx.AsyncClient(timeout=60.0, follow_redirects=True)
    try:
        return await _run(version, args, Path(root_dir).expanduser(),
                          allocated_ram, java_path, client)
    except LauncherError as e:
        logger.error("Launch of %s failed: %s", version.id, e)
        return False, str(e)
    finally:
        if own_client:
            await client.aclose()
