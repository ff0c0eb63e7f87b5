from rate_limit.limiter import FixedWindowLimiter, get_limiter


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_fixed_window_blocks_then_recovers():
    clock = FakeClock()
    lim = FixedWindowLimiter(window_ms=1000, max_requests=2, clock=clock)

    assert lim.hit("1.2.3.4")
    assert lim.hit("1.2.3.4")
    assert not lim.hit("1.2.3.4")
    assert lim.hit("5.6.7.8")
    assert lim.retry_after("1.2.3.4") == 1

    clock.now += 1.0
    assert lim.hit("1.2.3.4")


def test_get_limiter_reads_yaml_and_env_overrides(tmp_path):
    cfg = tmp_path / "limits.yaml"
    cfg.write_text("api:\n  window_ms: 5000\n  max_requests: 7\n")

    lim = get_limiter("api", config_path=cfg)
    assert lim.window == 5.0
    assert lim.max_requests == 7

    overridden = get_limiter("api", max_requests=3, config_path=cfg)
    assert overridden.max_requests == 3
    assert overridden is not lim
    assert get_limiter("api", config_path=cfg) is lim


def test_get_limiter_defaults_without_config(tmp_path):
    lim = get_limiter("other", config_path=tmp_path / "missing.yaml")
    assert lim.max_requests == 10000000
    assert lim.window == 900.0


def test_expired_clients_are_dropped():
    clock = FakeClock()
    lim = FixedWindowLimiter(window_ms=1000, max_requests=5, clock=clock)
    for i in range(10000):
        lim.hit(f"10.0.{i // 256}.{i % 256}")
    assert len(lim._hits) == 10000

    clock.now += 3600
    assert lim.hit("192.168.1.1")
    assert list(lim._hits) == ["192.168.1.1"]
