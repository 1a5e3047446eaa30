from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace


@dataclass(frozen=True)
class HotspotConfig:
    input_path: str
    top_zones: int = 10
    top_slots: int = 10
    outdir: str = "outputs/hotspots"
    plot: bool = False

    def __post_init__(self):
        if self.top_zones < 0:
            raise ValueError("top_zones must be >= 0")
        if self.top_slots < 0:
            raise ValueError("top_slots must be >= 0")

    def with_overrides(self, **overrides) -> "HotspotConfig":
        """Copy with every non-None override applied (CLI flags beat the file)."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(path="configs/hotspots.json") -> HotspotConfig:
    with open(path, "r") as f:
        raw = json.load(f)

    known = {fld.name for fld in fields(HotspotConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")
    if "input_path" not in raw:
        raise ValueError(f"{path} must set input_path")

    return HotspotConfig(**raw)
