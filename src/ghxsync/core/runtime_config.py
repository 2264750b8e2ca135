# どこで: `src/ghxsync/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 基準ロールや既定レンジ、複素数のゼロ判定閾値をユーザーが差し替えられるようにするため。

from __future__ import annotations

import math
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """ghxsync の実行時設定。"""

    config_path: Path | None
    primary_role: str
    default_min: float
    default_max: float
    default_step: float
    complex_epsilon: float


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    p = Path(str(path)).expanduser()
    _EXPLICIT_CONFIG_PATH = p
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".ghxsync" / "config.yaml",
        home / ".config" / "ghxsync" / "config.yaml",
    )


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_float(value: Any, *, key: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}")
    try:
        out = float(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc
    if not math.isfinite(out):
        raise RuntimeError(f"{key} は有限の数値である必要があります: got={value!r}")
    return out


def _as_text(value: Any, *, key: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise RuntimeError(f"{key} は文字列である必要があります: got={value!r}")
    return value


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    import yaml

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("ghxsync")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="ghxsync/resource/default_config.yaml")


def _merge_sections(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """トップレベルのセクション単位で override を重ねる（セクション内はキー単位で後勝ち）。"""

    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            merged = dict(out[key])
            merged.update(value)
            out[key] = merged
        else:
            out[key] = value
    return out


def _required(value: Any, *, key: str) -> Any:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    return value


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.ghxsync/config.yaml` / `~/.config/ghxsync/config.yaml`（先に見つかった方）
    3) `set_config_path()` で指定した config
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge_sections(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge_sections(payload, _load_yaml_config(explicit_path))

    version = payload.get("version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    try:
        version_i = int(version)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    sliders = _as_mapping(payload.get("sliders"), key="sliders")
    primary_role = _required(
        _as_text(sliders.get("primary_role"), key="sliders.primary_role"),
        key="sliders.primary_role",
    )
    default_min = _required(
        _as_float(sliders.get("default_min"), key="sliders.default_min"),
        key="sliders.default_min",
    )
    default_max = _required(
        _as_float(sliders.get("default_max"), key="sliders.default_max"),
        key="sliders.default_max",
    )
    default_step = _required(
        _as_float(sliders.get("default_step"), key="sliders.default_step"),
        key="sliders.default_step",
    )
    if default_step <= 0:
        raise ValueError(f"sliders.default_step は正の値である必要があります: got={default_step}")
    if default_max < default_min:
        raise ValueError(
            "sliders.default_max は sliders.default_min 以上である必要があります: "
            f"got=({default_min}, {default_max})"
        )

    complex_section = _as_mapping(payload.get("complex"), key="complex")
    epsilon = _required(
        _as_float(complex_section.get("epsilon"), key="complex.epsilon"),
        key="complex.epsilon",
    )
    if epsilon < 0:
        raise ValueError(f"complex.epsilon は非負である必要があります: got={epsilon}")

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        primary_role=str(primary_role),
        default_min=float(default_min),
        default_max=float(default_max),
        default_step=float(default_step),
        complex_epsilon=float(epsilon),
    )
    _CONFIG_CACHE = cfg
    return cfg


__all__ = ["RuntimeConfig", "runtime_config", "set_config_path"]
