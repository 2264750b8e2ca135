from pathlib import Path

import pytest

from ghxsync.core.runtime_config import runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.primary_role == "wireframe"
    assert (cfg.default_min, cfg.default_max, cfg.default_step) == (0.0, 10.0, 0.01)
    assert cfg.complex_epsilon == 1e-12


def test_runtime_config_is_cached(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    assert runtime_config() is runtime_config()


def test_discovered_config_overrides_individual_keys(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    discovered = _write(tmp_path / ".ghxsync" / "config.yaml", 'sliders:\n  primary_role: "render"\n')

    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.primary_role == "render"
    assert cfg.default_max == 10.0


def test_home_config_is_used_when_no_local_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    home_cfg = _write(tmp_path / ".config" / "ghxsync" / "config.yaml", "complex:\n  epsilon: 1.0e-6\n")

    cfg = runtime_config()
    assert cfg.config_path == home_cfg
    assert cfg.complex_epsilon == 1e-6


def test_explicit_config_overrides_discovered_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    _write(tmp_path / ".ghxsync" / "config.yaml", "sliders:\n  default_max: 50\n  default_step: 0.5\n")
    explicit = _write(tmp_path / "explicit.yaml", "sliders:\n  default_max: 20\n")
    set_config_path(explicit)

    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.default_max == 20.0
    assert cfg.default_step == 0.5


def test_explicit_config_path_missing_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    set_config_path(tmp_path / "missing.yaml")

    with pytest.raises(FileNotFoundError):
        runtime_config()


@pytest.mark.parametrize(
    ("text", "error"),
    [
        ("version: 2\n", RuntimeError),
        ("- not\n- a mapping\n", RuntimeError),
        ("sliders: [1, 2]\n", RuntimeError),
        ("sliders:\n  default_min: abc\n", RuntimeError),
        ("sliders:\n  default_min: true\n", RuntimeError),
        ("sliders:\n  primary_role: 3\n", RuntimeError),
        ("sliders:\n  default_step: 0\n", ValueError),
        ("sliders:\n  default_min: 5\n  default_max: 1\n", ValueError),
        ("complex:\n  epsilon: -1\n", ValueError),
        ("sliders: {default_min: [\n", RuntimeError),
    ],
)
def test_invalid_config_values_raise(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, text: str, error):
    _isolate_config_discovery(tmp_path, monkeypatch)
    set_config_path(_write(tmp_path / "bad.yaml", text))

    with pytest.raises(error):
        runtime_config()
