"""Process metrics collector"""
import os
import threading
import psutil
from .base import BaseCollector
from metrics.registry import MetricRegistry


class ProcessCollector(BaseCollector):
    """Collect resource usage of the exporter's own process using psutil"""

    collector_name = "process"

    def __init__(self, registry: MetricRegistry, config=None, pid: int = None):
        super().__init__(registry, config, help_text="Resource usage of the serving process")
        self._process = psutil.Process(pid or os.getpid())
        self._last_cpu_seconds = 0.0
        self._cpu_lock = threading.Lock()

        self.resident_memory = registry.define_gauge(
            "process_resident_memory_bytes", "Resident memory size in bytes"
        )
        self.virtual_memory = registry.define_gauge(
            "process_virtual_memory_bytes", "Virtual memory size in bytes"
        )
        self.open_fds = registry.define_gauge(
            "process_open_fds", "Number of open file descriptors"
        )
        self.threads = registry.define_gauge(
            "process_threads", "Number of OS threads in the process"
        )
        self.start_time = registry.define_gauge(
            "process_start_time_seconds", "Start time of the process since unix epoch in seconds"
        )
        self.cpu_seconds = registry.define_counter(
            "process_cpu_seconds_total", "Total user and system CPU time spent in seconds"
        )

    def collect(self) -> None:
        """Collect process metrics"""
        with self._process.oneshot():
            memory = self._process.memory_info()
            cpu = self._process.cpu_times()
            threads = self._process.num_threads()
            created = self._process.create_time()

        self.resident_memory.set(value=memory.rss)
        self.virtual_memory.set(value=memory.vms)
        self.threads.set(value=threads)
        self.start_time.set(value=created)

        # num_fds only exists on POSIX
        if hasattr(self._process, "num_fds"):
            self.open_fds.set(value=self._process.num_fds())

        # Concurrent scrapes must not both add the same delta
        cpu_seconds = cpu.user + cpu.system
        with self._cpu_lock:
            delta = cpu_seconds - self._last_cpu_seconds
            if delta > 0:
                self.cpu_seconds.add(delta=delta)
                self._last_cpu_seconds = cpu_seconds
