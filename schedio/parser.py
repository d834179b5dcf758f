# Workload + sysconfig parsers
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from schedcore.errors import ConfigurationError, WorkloadFormatError
from schedcore.process import ProcessDefinition

DEFAULT_DELIMITER = ';'
FIELD_COUNT = 5  # name, arrival, cpu burst, io duration, io rate


@dataclass
class SysConfig:
    time_quantum: Optional[int] = None
    delimiter: Optional[str] = None


def _read_lines(path: str) -> List[str]:
    try:
        with open(path, 'r', encoding='utf-8') as fh:
            return fh.read().splitlines()
    except OSError as exc:
        raise ConfigurationError(f"unable to read {path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigurationError(f"unable to read {path}: not valid {exc.encoding} text "
                                 f"(byte {exc.object[exc.start]:#04x} at offset {exc.start})") from exc


def parse_workload_lines(lines: Iterable[str], delimiter: str = DEFAULT_DELIMITER,
                         source: str = '<workload>') -> List[ProcessDefinition]:
    if len(delimiter) != 1:
        raise ConfigurationError(f"workload delimiter must be a single character, got {delimiter!r}")
    procs: List[ProcessDefinition] = []
    seen = set()
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        found = line.count(delimiter)
        if found != FIELD_COUNT - 1:
            raise WorkloadFormatError(source, lineno,
                                      f"expected {FIELD_COUNT - 1} '{delimiter}' delimiters, found {found}")
        name, *numbers = [part.strip() for part in line.split(delimiter)]
        try:
            arrival, cpu, io_duration, io_rate = (int(n) for n in numbers)
        except ValueError:
            raise WorkloadFormatError(source, lineno, f"non-integer field in {line!r}") from None
        if name in seen:
            raise WorkloadFormatError(source, lineno, f"duplicate process name {name!r}")
        try:
            procs.append(ProcessDefinition(name, arrival, cpu, io_duration, io_rate))
        except ConfigurationError as exc:
            raise WorkloadFormatError(source, lineno, str(exc)) from None
        seen.add(name)
    if not procs:
        raise ConfigurationError(f"{source}: workload defines no processes")
    return procs


def parse_workload(path: str, delimiter: str = DEFAULT_DELIMITER) -> List[ProcessDefinition]:
    return parse_workload_lines(_read_lines(path), delimiter=delimiter, source=path)


def parse_sysconfig(path: str) -> SysConfig:
    config = SysConfig()
    for lineno, raw in enumerate(_read_lines(path), start=1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        parts = re.split(r'\s+', line)
        if len(parts) != 2:
            raise ConfigurationError(f"{path}:{lineno}: expected '<directive> <value>', got {line!r}")
        directive, value = parts
        if directive == 'timequantum':
            match = re.fullmatch(r'(\d+)(ticks?)?', value)
            if not match or int(match.group(1)) < 1:
                raise ConfigurationError(f"{path}:{lineno}: invalid time quantum {value!r}")
            config.time_quantum = int(match.group(1))
        elif directive == 'delimiter':
            if len(value) != 1:
                raise ConfigurationError(f"{path}:{lineno}: delimiter must be a single character")
            config.delimiter = value
        else:
            raise ConfigurationError(f"{path}:{lineno}: unknown directive {directive!r}")
    return config
