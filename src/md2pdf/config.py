from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping


CONFIG_FILE = Path("config.toml")


@dataclass(slots=True)
class RuntimeConfig:
    output_dir: Path = Path("runs")
    log_file: str = "log.jsonl"
    image_timeout_s: float = 10.0
    image_workers: int = 4
    render_timeout_s: int = 60

    @property
    def log_path(self) -> Path | None:
        if not self.log_file:
            return None
        return self.output_dir / self.log_file


@dataclass(slots=True)
class RenderDefaults:
    theme: str = "clean"
    paper: str = "Letter"
    margin: str = "16mm"
    toc: bool = True
    header_footer: bool = False


@dataclass(slots=True)
class APIConfig:
    host: str = "127.0.0.1"
    port: int = 3000
    default_file: Path | None = None


@dataclass(slots=True)
class AppConfig:
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    defaults: RenderDefaults = field(default_factory=RenderDefaults)
    api: APIConfig = field(default_factory=APIConfig)


def _read_toml(path: Path) -> Mapping[str, object]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _build_runtime(data: Mapping[str, object] | None) -> RuntimeConfig:
    if not data:
        return RuntimeConfig()
    return RuntimeConfig(
        output_dir=Path(str(data.get("output_dir", "runs"))),
        log_file=str(data.get("log_file", "log.jsonl")),
        image_timeout_s=float(data.get("image_timeout_s", 10.0)),
        image_workers=max(1, int(data.get("image_workers", 4))),
        render_timeout_s=int(data.get("render_timeout_s", 60)),
    )


def _build_defaults(data: Mapping[str, object] | None) -> RenderDefaults:
    if not data:
        return RenderDefaults()
    return RenderDefaults(
        theme=str(data.get("theme", "clean")),
        paper=str(data.get("paper", "Letter")),
        margin=str(data.get("margin", "16mm")),
        toc=bool(data.get("toc", True)),
        header_footer=bool(data.get("header_footer", False)),
    )


def _build_api(data: Mapping[str, object] | None) -> APIConfig:
    if not data:
        return APIConfig()
    default_file = data.get("default_file")
    return APIConfig(
        host=str(data.get("host", "127.0.0.1")),
        port=int(data.get("port", 3000)),
        default_file=Path(str(default_file)) if default_file else None,
    )


def _section(raw: Mapping[str, object], name: str) -> Mapping[str, object] | None:
    value = raw.get(name) if isinstance(raw, Mapping) else None
    return value if isinstance(value, Mapping) else None


def load_config(path: Path | None = None) -> AppConfig:
    path = path or CONFIG_FILE
    raw = _read_toml(path)
    return AppConfig(
        runtime=_build_runtime(_section(raw, "runtime")),
        defaults=_build_defaults(_section(raw, "defaults")),
        api=_build_api(_section(raw, "api")),
    )


def dump_config(config: AppConfig) -> str:
    payload = {
        "runtime": {
            "output_dir": str(config.runtime.output_dir),
            "log_file": config.runtime.log_file,
            "image_timeout_s": config.runtime.image_timeout_s,
            "image_workers": config.runtime.image_workers,
            "render_timeout_s": config.runtime.render_timeout_s,
        },
        "defaults": {
            "theme": config.defaults.theme,
            "paper": config.defaults.paper,
            "margin": config.defaults.margin,
            "toc": config.defaults.toc,
            "header_footer": config.defaults.header_footer,
        },
        "api": {
            "host": config.api.host,
            "port": config.api.port,
            "default_file": str(config.api.default_file) if config.api.default_file else None,
        },
    }
    return json.dumps(payload, indent=2)
