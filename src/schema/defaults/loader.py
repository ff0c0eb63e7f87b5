import copy
import yaml
from functools import lru_cache
from pathlib import Path

DEFAULTS_DIR = Path(__file__).resolve().parent


@lru_cache(maxsize=None)
def _read(provider: str) -> dict:
    p = DEFAULTS_DIR / f"{provider.lower()}.yaml"
    if not p.exists():
        available = [x.name for x in DEFAULTS_DIR.glob("*.yaml")]
        raise FileNotFoundError(
            f"No submission defaults found for provider '{provider}' at {p}. "
            f"Available: {available}"
        )
    return yaml.safe_load(p.read_text()) or {}


def load_defaults(provider: str = "docuseal") -> dict:
    # callers mutate the result; hand out a fresh copy of the cached file
    return copy.deepcopy(_read(provider))
