"""Logger setup for the polygeom package.

Every module logs through a child of the 'polygeom' logger, which writes to
stdout and never propagates, so applications keep full control of the
process-wide root logger.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')
_ROOT_NAME = 'polygeom'
_NOISY = ('matplotlib', 'matplotlib.font_manager', 'PIL')


def _package_logger() -> logging.Logger:
    """The 'polygeom' logger, with its stdout handler attached on first use."""
    root = logging.getLogger(_ROOT_NAME)
    real = [h for h in root.handlers if not isinstance(h, logging.NullHandler)]
    if not real:
        # the facade's NullHandler is dropped once a real handler exists
        for h in list(root.handlers):
            root.removeHandler(h)
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_FORMAT)
        root.addHandler(handler)
    root.propagate = False
    return root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else default


def configure_logging(level: Union[str, int] = 'INFO', mute_external: bool = True) -> None:
    """Set the level shared by all polygeom loggers.

    At DEBUG, matplotlib and PIL are held at INFO unless ``mute_external`` is
    False. Loggers outside the package are otherwise untouched.
    """
    lvl = _to_level(level)
    _package_logger().setLevel(lvl)
    if not mute_external or lvl > logging.DEBUG:
        return
    for noisy in _NOISY:
        logging.getLogger(noisy).setLevel(logging.INFO)


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Logger ``name``, moved under 'polygeom.' when it is not already there.

    Without ``level`` the logger is NOTSET and follows configure_logging().
    """
    _package_logger()
    if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + '.'):
        name = f'{_ROOT_NAME}.{name}'
    log = logging.getLogger(name)
    log.setLevel(logging.NOTSET if level is None else _to_level(level))
    return log


__all__ = ['get_logger', 'configure_logging']
