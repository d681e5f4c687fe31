"""
Host information and utilization snapshots.

psutil keeps sampling state between ``cpu_percent`` calls, so the probe is a
single owned resource: construct one ``HostProbe`` at process start and pass
it to whoever needs it. Its lock makes each refresh-then-read atomic.
"""
import platform
import socket
import threading
import time
from pathlib import Path

import psutil

from .logger import logger
from .models import HostInfo, HostStats

UNKNOWN = "Unknown"


def _os_name() -> str:
    try:
        release = platform.freedesktop_os_release()
        return release.get("NAME") or platform.system() or UNKNOWN
    except (OSError, AttributeError):
        return platform.system() or UNKNOWN


def _cpu_model() -> str:
    cpuinfo = Path("/proc/cpuinfo")
    if cpuinfo.exists():
        for line in cpuinfo.read_text(encoding="utf-8", errors="replace").splitlines():
            if line.lower().startswith("model name"):
                return line.split(":", 1)[1].strip()
    return platform.processor() or UNKNOWN


class HostProbe:
    """Lock-guarded wrapper around process-wide OS statistics."""

    def __init__(self):
        self._lock = threading.Lock()
        with self._lock:
            # First cpu_percent(None) call only primes the sampler
            psutil.cpu_percent(interval=None)
        logger.debug("Host probe initialized")

    def get_host_info(self) -> HostInfo:
        """Descriptive one-shot snapshot."""
        with self._lock:
            total = psutil.virtual_memory().total
            boot = psutil.boot_time()
            return HostInfo(
                os=_os_name(),
                kernel=platform.release() or UNKNOWN,
                hostname=socket.gethostname() or UNKNOWN,
                cpu=_cpu_model(),
                memory=f"{total / 1024 / 1024 / 1024:.2f} GB",
                uptime=f"{int(time.time() - boot)} s",
            )

    def get_host_stats(self) -> HostStats:
        """
        CPU percent since the previous sample and memory percent.

        Memory percent is (total - available) / total * 100, truncated.
        """
        with self._lock:
            cpu = psutil.cpu_percent(interval=None)
            vm = psutil.virtual_memory()
            used = vm.total - vm.available
            mem = int(used / vm.total * 100) if vm.total else 0
            return HostStats(cpu=float(cpu), mem=mem)
