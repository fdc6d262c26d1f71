"""
Time Racers Logging

Console loggers with per-module levels, plus JSONL record files for the
events worth replaying after a run (penalties, spawns, game over).

    log = get_logger('spawner')
    log.debug("Spawned %s", 'yapper')

    emit_record('session', {'event': 'penalty', 'seconds': 10})

Environment:
    TR_LOG_LEVEL=DEBUG                  level for every module
    TR_LOG_<MODULE>=TRACE               level for one module
    TR_LOG_DIR=/tmp/tr-logs             where record files go
    TR_LOGGING_<MODULE>_ENABLED=true    write <module> records to disk
"""

import json
import os
import time
import traceback
from enum import IntEnum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, TextIO


class LogLevel(IntEnum):
    TRACE = 5      # per-tick detail
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50
    OFF = 100

    @classmethod
    def parse(cls, name: str) -> 'LogLevel':
        """Level for a name such as 'debug' or 'WARN'; INFO if unknown."""
        name = name.strip().upper()
        if name == 'WARN':
            return cls.WARNING
        return cls.__members__.get(name, cls.INFO)


_LABELS = {
    LogLevel.TRACE: 'TRACE',
    LogLevel.DEBUG: 'DEBUG',
    LogLevel.INFO: 'INFO',
    LogLevel.WARNING: 'WARN',
    LogLevel.ERROR: 'ERROR',
    LogLevel.CRITICAL: 'CRIT',
}

_TRUTHY = ('1', 'true', 'yes', 'on')

_config: Dict[str, Any] = {
    'default_level': LogLevel.INFO,
    'module_levels': {},     # module -> LogLevel
    'log_dir': None,         # None: $XDG_DATA_HOME/time-racers/logs
    'modules': {},           # module -> record settings, e.g. {'enabled': True}
}


# -----------------------------------------------------------------------------
# Record sinks
# -----------------------------------------------------------------------------

class NullSink:
    """Accepts records and drops them."""

    def emit(self, module: str, record: Dict[str, Any]) -> None:
        pass

    def close(self) -> None:
        pass


class FileSink(NullSink):
    """Appends records to ``<log_dir>/<session_name>_<module>.jsonl``.

    Every file opens with a ``session_start`` line and gets a
    ``session_end`` line on close. Lines are flushed as they are written,
    so a crashed run still leaves its records behind.
    """

    def __init__(self, log_dir: Optional[str] = None, session_name: Optional[str] = None):
        self.log_dir = Path(log_dir) if log_dir else None
        self.session_name = session_name or time.strftime("%Y%m%d_%H%M%S")
        self._open: Dict[str, TextIO] = {}

    def _write(self, handle: TextIO, line: Dict[str, Any]) -> None:
        handle.write(json.dumps(line) + "\n")
        handle.flush()

    def _handle(self, module: str) -> TextIO:
        handle = self._open.get(module)
        if handle is None:
            folder = self.log_dir or Path(log_directory())
            folder.mkdir(parents=True, exist_ok=True)
            handle = open(folder / f"{self.session_name}_{module}.jsonl", 'a')
            self._open[module] = handle
            self._write(handle, {'type': 'session_start', 'module': module,
                                 'session': self.session_name, 'time': time.time()})
        return handle

    def emit(self, module: str, record: Dict[str, Any]) -> None:
        self._write(self._handle(module), {'time': time.time(), **record})

    def close(self) -> None:
        for module, handle in self._open.items():
            self._write(handle, {'type': 'session_end', 'module': module, 'time': time.time()})
            handle.close()
        self._open.clear()


_sinks: Dict[str, NullSink] = {}


def register_sink(module: str, sink: NullSink) -> None:
    _sinks[module] = sink


def emit_record(module: str, record: Dict[str, Any]) -> bool:
    """Send a record to the module's sink. False if none is registered."""
    sink = _sinks.get(module)
    if sink is None:
        return False
    sink.emit(module, record)
    return True


def close_all_sinks() -> None:
    for sink in _sinks.values():
        sink.close()
    _sinks.clear()


def create_sink(module: str, session_name: Optional[str] = None) -> NullSink:
    """FileSink if TR_LOGGING_<MODULE>_ENABLED is set, else NullSink."""
    if _config['modules'].get(module.lower(), {}).get('enabled'):
        return FileSink(log_dir=_config['log_dir'], session_name=session_name)
    return NullSink()


def log_directory() -> str:
    if _config['log_dir']:
        return str(Path(_config['log_dir']).expanduser())
    data_home = os.environ.get('XDG_DATA_HOME') or str(Path.home() / '.local' / 'share')
    return str(Path(data_home) / 'time-racers' / 'logs')


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

def configure_logging(
    level: str = 'INFO',
    modules: Optional[Dict[str, str]] = None,
    log_dir: Optional[str] = None,
) -> None:
    """Set the default level, per-module levels and the record directory."""
    _config['default_level'] = LogLevel.parse(level)
    for module, module_level in (modules or {}).items():
        _config['module_levels'][module.lower()] = LogLevel.parse(module_level)
    if log_dir:
        _config['log_dir'] = log_dir


def disable_logging() -> None:
    _config['default_level'] = LogLevel.OFF
    _config['module_levels'].clear()


def _read_environment(environ=os.environ) -> None:
    for key, value in environ.items():
        if key == 'TR_LOG_LEVEL':
            _config['default_level'] = LogLevel.parse(value)
        elif key == 'TR_LOG_DIR':
            _config['log_dir'] = value
        elif key.startswith('TR_LOG_'):
            _config['module_levels'][key[len('TR_LOG_'):].lower()] = LogLevel.parse(value)
        elif key.startswith('TR_LOGGING_') and key.endswith('_ENABLED'):
            module = key[len('TR_LOGGING_'):-len('_ENABLED')].lower()
            _config['modules'].setdefault(module, {})['enabled'] = value.strip().lower() in _TRUTHY


_read_environment()


# -----------------------------------------------------------------------------
# Console loggers
# -----------------------------------------------------------------------------

class TRLogger:
    """Prints ``[module] LEVEL: message`` lines at or above the module's level."""

    def __init__(self, module: str):
        self.module = module
        self._key = module.lower().replace('.', '_')

    @property
    def level(self) -> LogLevel:
        return _config['module_levels'].get(self._key, _config['default_level'])

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def log(self, level: LogLevel, msg: str, *args) -> None:
        if not self.is_enabled_for(level):
            return
        if args:
            try:
                msg = msg % args
            except (TypeError, ValueError):
                msg = f"{msg} {args}"
        print(f"[{self.module}] {_LABELS[level]}: {msg}")

    def trace(self, msg: str, *args) -> None:
        self.log(LogLevel.TRACE, msg, *args)

    def debug(self, msg: str, *args) -> None:
        self.log(LogLevel.DEBUG, msg, *args)

    def info(self, msg: str, *args) -> None:
        self.log(LogLevel.INFO, msg, *args)

    def warning(self, msg: str, *args) -> None:
        self.log(LogLevel.WARNING, msg, *args)

    def error(self, msg: str, *args) -> None:
        self.log(LogLevel.ERROR, msg, *args)

    def critical(self, msg: str, *args) -> None:
        self.log(LogLevel.CRITICAL, msg, *args)

    def exception(self, msg: str, *args) -> None:
        """Log at ERROR, then the traceback of the exception being handled."""
        self.log(LogLevel.ERROR, msg, *args)
        if not self.is_enabled_for(LogLevel.ERROR):
            return
        tb = traceback.format_exc().rstrip()
        if tb and tb != 'NoneType: None':
            for line in tb.splitlines():
                print(f"[{self.module}]   {line}")


@lru_cache(maxsize=64)
def get_logger(module: str) -> TRLogger:
    """Cached logger for a module."""
    return TRLogger(module)
