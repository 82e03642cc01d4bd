from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from .logic import HARD_MAX_VARIABLES


@dataclass(frozen=True)
class Settings:
    # Variable bounds enforced before a truth table is built
    min_variables: int = 1
    max_variables: int = HARD_MAX_VARIABLES

    # Page
    page_title: str = "Logic Circuit Simulator"
    show_steps: bool = True


def _env(name: str) -> str | None:
    for key in (name, name.upper(), name.lower()):
        if key in os.environ:
            return os.environ[key]
    return None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    d = Settings().__dict__.copy()

    title = _env("LOGIC_CIRCUIT_PAGE_TITLE")
    if title:
        d["page_title"] = title

    raw_max = _env("LOGIC_CIRCUIT_MAX_VARIABLES")
    if raw_max:
        try:
            value = int(raw_max)
        except ValueError as exc:
            raise ValueError(
                f"LOGIC_CIRCUIT_MAX_VARIABLES must be an integer, got {raw_max!r}"
            ) from exc
        # can be lowered, never raised past the hard ceiling
        d["max_variables"] = max(d["min_variables"], min(value, HARD_MAX_VARIABLES))

    raw_steps = _env("LOGIC_CIRCUIT_SHOW_STEPS")
    if raw_steps is not None:
        d["show_steps"] = raw_steps not in ("0", "false", "False", "")

    return Settings(**d)
