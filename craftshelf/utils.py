import os
import platform
from typing import Optional, Tuple

# platform.system() -> os name used by version metadata rules
_OS_NAMES = {
    "Darwin": "osx",
    "Windows": "windows",
    "Linux": "linux",
}

_ARCH_NAMES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "arm64": "arm64",
    "aarch64": "arm64",
}

def is_windows() -> bool:
    return os.name == "nt"

def current_os() -> Optional[str]:
    return _OS_NAMES.get(platform.system())

def current_arch() -> Optional[str]:
    return _ARCH_NAMES.get(platform.machine().lower())

def current_platform() -> Tuple[Optional[str], Optional[str]]:
    return current_os(), current_arch()

def classpath_separator(os_name: Optional[str] = None) -> str:
    os_name = os_name or current_os()
    return ";" if os_name == "windows" else ":"
