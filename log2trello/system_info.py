"""Host system information appended to exception reports."""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass

UNKNOWN = "Unknown"


def _physical_memory_mb() -> str:
    try:
        page_size = os.sysconf("SC_PAGE_SIZE")
        pages = os.sysconf("SC_PHYS_PAGES")
    except (AttributeError, ValueError, OSError):
        # os.sysconf is POSIX-only
        return UNKNOWN
    if page_size <= 0 or pages <= 0:
        return UNKNOWN
    return str(page_size * pages // (1024 * 1024))


@dataclass
class SystemInformation:
    """Device, graphics and processor details of the reporting machine

    The standard library cannot see the graphics adapter or the processor
    clock, so those fields stay "Unknown" unless the host application passes
    them to ``collect()``.
    """

    device_name: str = UNKNOWN
    device_type: str = UNKNOWN
    operating_system: str = UNKNOWN
    system_memory_mb: str = UNKNOWN

    graphics_device_name: str = UNKNOWN
    graphics_device_vendor: str = UNKNOWN
    graphics_memory_mb: str = UNKNOWN
    graphics_shader_level: str = UNKNOWN

    processor_type: str = UNKNOWN
    processor_count: str = UNKNOWN
    processor_frequency: str = UNKNOWN

    @classmethod
    def collect(cls, **overrides: str) -> SystemInformation:
        """Gather what the platform exposes; ``overrides`` replace any field"""
        info = cls(
            device_name=platform.node() or UNKNOWN,
            device_type=platform.machine() or UNKNOWN,
            operating_system=platform.platform() or UNKNOWN,
            system_memory_mb=_physical_memory_mb(),
            processor_type=platform.processor() or platform.machine() or UNKNOWN,
            processor_count=str(os.cpu_count() or UNKNOWN),
        )
        for name, value in overrides.items():
            if not hasattr(info, name):
                raise TypeError(f"Unknown system information field: {name}")
            setattr(info, name, value)
        return info

    def build(
        self, device_info: bool = True, graphics_info: bool = True, processor_info: bool = True
    ) -> str:
        """Format the selected sections, each followed by a blank line"""
        sections = []
        if device_info:
            sections.append(
                f"Device Name: {self.device_name}\n"
                f"Device Type: {self.device_type}\n"
                f"Operating System: {self.operating_system}\n"
                f"Physical Memory: {self.system_memory_mb}MB\n\n"
            )
        if graphics_info:
            sections.append(
                f"Graphics Device Name: {self.graphics_device_name}\n"
                f"Graphics Device Vendor: {self.graphics_device_vendor}\n"
                f"Graphics Device Memory: {self.graphics_memory_mb}MB\n"
                f"Graphics Shader Level: {self.graphics_shader_level}\n\n"
            )
        if processor_info:
            sections.append(
                f"Processor: {self.processor_type}\n"
                f"Processor Threads: {self.processor_count}\n"
                f"Processor Frequency: {self.processor_frequency}HZ\n\n"
            )
        return "".join(sections)
