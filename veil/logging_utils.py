from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(*, level: str | int = "INFO") -> None:
    """Configure root logging for processes hosting the engine.

    Engine modules only ever log identities, cell indexes and handle counts.
    """

    logging.basicConfig(level=level, format=_FORMAT)
    # redis-py is chatty at DEBUG.
    logging.getLogger("redis").setLevel(logging.WARNING)
