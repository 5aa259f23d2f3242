from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


DEFAULT_REDIS_URL = "redis://localhost:6379/0"
DEFAULT_ENGINE_ID = "veil-engine"
# Only meaningful for the mock provider; real coprocessors verify proofs themselves.
DEFAULT_INPUT_PROOF_KEY = "veil-dev-input-proof-key"


@dataclass(frozen=True, slots=True)
class EngineSettings:
    redis_url: str
    engine_id: str
    input_proof_key: str
    log_level: str


def settings_from_env(*, dotenv_path: Path | None = None) -> EngineSettings:
    """Build settings from the environment.

    A `.env` file is loaded first when one exists, without overriding variables
    already exported in the shell.
    """

    if dotenv_path is not None:
        load_dotenv(dotenv_path=dotenv_path, override=False)
    else:
        load_dotenv(override=False)

    return EngineSettings(
        redis_url=os.environ.get("REDIS_URL", DEFAULT_REDIS_URL),
        engine_id=os.environ.get("VEIL_ENGINE_ID", DEFAULT_ENGINE_ID),
        input_proof_key=os.environ.get("VEIL_INPUT_PROOF_KEY", DEFAULT_INPUT_PROOF_KEY),
        log_level=os.environ.get("VEIL_LOG_LEVEL", "INFO").upper(),
    )
