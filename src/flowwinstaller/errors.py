"""Domain errors for flowwinstaller."""


class InstallerError(RuntimeError):
    """Raised when the installation cannot continue safely."""
