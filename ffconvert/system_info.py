"""
Hardware inventory (CPU, RAM, GPU)

Linux reads /proc, macOS uses sysctl and Windows queries CIM classes
through PowerShell. Every probe is best effort: anything that cannot be
read is left as "unknown" and the snapshot itself never raises.
"""

import json
import logging
import os
import platform
import re
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .config import ToolConfig
from .models import CpuInfo, GpuInfo, HardwareSnapshot, RamInfo, UNKNOWN, _to_int

logger = logging.getLogger(__name__)

PROC_CPUINFO = Path('/proc/cpuinfo')
PROC_MEMINFO = Path('/proc/meminfo')
PROBE_TIMEOUT = 5
# PowerShell start-up alone can take a few seconds
CIM_TIMEOUT = 15

CPU_VENDORS = {
    'GenuineIntel': 'Intel',
    'AuthenticAMD': 'AMD',
}


def _run_query(cmd: List[str], timeout: int = PROBE_TIMEOUT) -> Optional[str]:
    """stdout of a helper command, None if it is missing or fails"""
    try:
        p = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("%s unavailable: %s", cmd[0], e)
        return None
    if p.returncode != 0:
        logger.debug("%s exited with %d", cmd[0], p.returncode)
        return None
    return p.stdout


def _read_key_values(path: Path) -> List[Dict[str, str]]:
    """Parse 'key : value' blocks (separated by blank lines) from a /proc file"""
    try:
        text = path.read_text(errors='replace')
    except OSError:
        return []
    blocks, current = [], {}
    for line in text.splitlines():
        if not line.strip():
            if current:
                blocks.append(current)
                current = {}
            continue
        key, sep, value = line.partition(':')
        if sep:
            current[key.strip()] = value.strip()
    if current:
        blocks.append(current)
    return blocks


def _sysctl(name: str) -> Optional[str]:
    out = _run_query(['sysctl', '-n', name])
    return out.strip() if out and out.strip() else None


def _cim_query(class_name: str, properties: List[str]) -> List[Dict]:
    """Instances of a Windows CIM class as dicts, [] if PowerShell cannot answer"""
    script = (f"Get-CimInstance -ClassName {class_name} | "
              f"Select-Object {','.join(properties)} | ConvertTo-Json -Compress")
    out = _run_query(['powershell', '-NoProfile', '-NonInteractive', '-Command', script], CIM_TIMEOUT)
    if not out or not out.strip():
        return []
    try:
        rows = json.loads(out)
    except json.JSONDecodeError as e:
        logger.debug("Unreadable %s output: %s", class_name, e)
        return []
    # a single instance comes back as an object, several as a list
    rows = rows if isinstance(rows, list) else [rows]
    return [row for row in rows if isinstance(row, dict)]


def _vendor_from_name(name: str) -> str:
    for vendor in ('Intel', 'AMD', 'Apple', 'Qualcomm', 'ARM'):
        if vendor.lower() in name.lower():
            return vendor
    return UNKNOWN


def get_cpu_info() -> CpuInfo:
    """CPU name, vendor and core/thread counts"""
    info = CpuInfo(threads=os.cpu_count())

    blocks = _read_key_values(PROC_CPUINFO)
    if blocks:
        first = blocks[0]
        info.name = first.get('model name') or first.get('Hardware') or info.name
        vendor_id = first.get('vendor_id')
        if vendor_id:
            info.vendor = CPU_VENDORS.get(vendor_id, vendor_id)
        physical = {(b.get('physical id'), b.get('core id')) for b in blocks if 'core id' in b}
        if physical:
            info.cores = len(physical)
    elif sys.platform == 'darwin':
        info.name = _sysctl('machdep.cpu.brand_string') or info.name
        cores = _sysctl('hw.physicalcpu')
        if cores and cores.isdigit():
            info.cores = int(cores)
    elif sys.platform == 'win32':
        processors = _cim_query('Win32_Processor', ['Name', 'Manufacturer', 'NumberOfCores'])
        if processors:
            info.name = (processors[0].get('Name') or '').strip() or info.name
            manufacturer = processors[0].get('Manufacturer')
            if manufacturer:
                info.vendor = CPU_VENDORS.get(manufacturer, manufacturer)
            cores = [p.get('NumberOfCores') for p in processors if isinstance(p.get('NumberOfCores'), int)]
            if cores:
                info.cores = sum(cores)

    if info.name == UNKNOWN and platform.processor():
        info.name = platform.processor()
    if info.vendor == UNKNOWN and info.name != UNKNOWN:
        info.vendor = _vendor_from_name(info.name)
    if info.cores is None:
        info.cores = info.threads
    return info


def get_ram_info() -> RamInfo:
    """Total RAM and, where dmidecode or CIM is readable, module speed"""
    info = RamInfo()

    blocks = _read_key_values(PROC_MEMINFO)
    if blocks:
        mem_total = blocks[0].get('MemTotal', '')
        match = re.match(r'(\d+)\s*kB', mem_total)
        if match:
            info.total_bytes = int(match.group(1)) * 1024
    elif sys.platform == 'darwin':
        memsize = _sysctl('hw.memsize')
        if memsize and memsize.isdigit():
            info.total_bytes = int(memsize)
    elif sys.platform == 'win32':
        systems = _cim_query('Win32_ComputerSystem', ['TotalPhysicalMemory'])
        if systems:
            info.total_bytes = _to_int(systems[0].get('TotalPhysicalMemory'))
        speeds = [_to_int(m.get('Speed')) for m in _cim_query('Win32_PhysicalMemory', ['Speed'])]
        speeds = [s for s in speeds if s]
        if speeds:
            info.speed_mhz = max(speeds)
        return info

    # Usually needs root; silently skipped otherwise
    out = _run_query(['dmidecode', '--type', 'memory'])
    if out:
        speeds = [int(s) for s in re.findall(r'^\s*(?:Configured Memory )?Speed:\s*(\d+)\s*(?:MT/s|MHz)', out, re.MULTILINE)]
        if speeds:
            info.speed_mhz = max(speeds)
    return info


def _nvidia_gpus(config: ToolConfig) -> List[GpuInfo]:
    out = _run_query([config.nvidia_smi_path, '--query-gpu=name,memory.total',
                      '--format=csv,noheader,nounits'])
    if not out:
        return []

    gpus = []
    for line in out.strip().splitlines():
        name, _, memory = line.rpartition(',')
        name, memory = name.strip(), memory.strip()
        if not name:
            name, memory = memory, ''
        memory_bytes = int(memory) * 1024 * 1024 if memory.isdigit() else None
        gpus.append(GpuInfo(name=name or UNKNOWN, memory_bytes=memory_bytes))
    return gpus


def _windows_gpus() -> List[GpuInfo]:
    # AdapterRAM is a 32-bit field, so cards above 4 GiB report a truncated size
    return [GpuInfo(name=(c.get('Name') or '').strip() or UNKNOWN,
                    memory_bytes=_to_int(c.get('AdapterRAM')) or None)
            for c in _cim_query('Win32_VideoController', ['Name', 'AdapterRAM'])]


def get_gpu_info(config: Optional[ToolConfig] = None) -> List[GpuInfo]:
    """NVIDIA GPUs via nvidia-smi; on Windows any display adapter CIM knows about"""
    config = config or ToolConfig()
    gpus = _nvidia_gpus(config)
    if not gpus and sys.platform == 'win32':
        gpus = _windows_gpus()
    return gpus


def collect_hardware_snapshot(config: Optional[ToolConfig] = None) -> HardwareSnapshot:
    """Read-only snapshot of CPU, RAM and GPU"""
    snapshot = HardwareSnapshot(
        cpu=get_cpu_info(),
        ram=get_ram_info(),
        gpus=get_gpu_info(config),
    )
    logger.debug("Hardware snapshot: %s", snapshot)
    return snapshot
