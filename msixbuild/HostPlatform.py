# HostPlatform.py
import platform


class HostPlatform:
    """Reports whether the current host can run the Windows SDK tools."""

    def __init__(self, system: str | None = None):
        self._system = system if system is not None else platform.system()

    def is_target_platform(self) -> bool:
        return self._system == "Windows"
