import math
import time
import threading
import yaml
from pathlib import Path
from typing import Dict, Optional, Tuple

CONFIG_PATH = Path("configs/rate_limits.yaml")
DEFAULTS = {"window_ms": 15 * 60 * 1000, "max_requests": 10000000}


class FixedWindowLimiter:
    """Counts hits per client inside a fixed window; the window restarts on the first hit after it expires."""

    def __init__(self, window_ms: int, max_requests: int, clock=time.monotonic):
        self.window = window_ms / 1000.0
        self.max_requests = max_requests
        self.lock = threading.Lock()
        self._clock = clock
        self._hits: Dict[str, Tuple[float, int]] = {}
        self._last_sweep = clock()

    def hit(self, client: str) -> bool:
        with self.lock:
            now = self._clock()
            if now - self._last_sweep >= self.window:
                self._sweep(now)
            start, count = self._hits.get(client, (now, 0))
            if now - start >= self.window:
                start, count = now, 0
            count += 1
            self._hits[client] = (start, count)
            return count <= self.max_requests

    def _sweep(self, now: float) -> None:
        # caller holds the lock
        self._hits = {c: v for c, v in self._hits.items() if now - v[0] < self.window}
        self._last_sweep = now

    def retry_after(self, client: str) -> int:
        with self.lock:
            start, _ = self._hits.get(client, (self._clock(), 0))
            remaining = self.window - (self._clock() - start)
        return max(0, math.ceil(remaining))

    def reset(self) -> None:
        with self.lock:
            self._hits.clear()
            self._last_sweep = self._clock()


def _load_config(path: Optional[Path] = None):
    p = path or CONFIG_PATH
    if not p.exists():
        return {}
    return yaml.safe_load(p.read_text()) or {}


_limiters: Dict[str, FixedWindowLimiter] = {}


def get_limiter(
    scope: str,
    window_ms: Optional[int] = None,
    max_requests: Optional[int] = None,
    config_path: Optional[Path] = None,
) -> FixedWindowLimiter:
    cfg = {**DEFAULTS, **_load_config(config_path).get(scope, {})}
    if window_ms is not None:
        cfg["window_ms"] = window_ms
    if max_requests is not None:
        cfg["max_requests"] = max_requests
    key = f"{scope}:{cfg['window_ms']}:{cfg['max_requests']}"
    if key not in _limiters:
        _limiters[key] = FixedWindowLimiter(int(cfg["window_ms"]), int(cfg["max_requests"]))
    return _limiters[key]
