class LauncherError(Exception):
    """Base for every failure the launch core reports upward."""

class NetworkError(LauncherError):
    pass

class FilesystemError(LauncherError):
    pass

class ParseError(LauncherError):
    pass

class ArchiveError(LauncherError):
    pass

class UnsupportedPlatform(LauncherError):
    pass

class ResolutionError(LauncherError):
    pass

class MalformedResponse(LauncherError):
    pass
