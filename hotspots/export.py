from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from hotspots.analyzer import SlotCount, TripAnalyzer, ZoneCount


def zones_frame(rows: list[ZoneCount]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=["zone", "count"]).astype({"count": "int64"})


def slots_frame(rows: list[SlotCount]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=["zone", "hour", "count"]).astype(
        {"hour": "int64", "count": "int64"}
    )


def hour_profile(analyzer: TripAnalyzer, zones) -> np.ndarray:
    """
    Pickups per hour of day for each zone in `zones`.

    Row i is zones[i], column h is hour h. Zones that were never seen get
    an all-zero row.
    """
    zones = list(zones)
    zone_to_idx = {z: i for i, z in enumerate(zones)}
    profile = np.zeros((len(zones), 24), dtype=np.int64)

    for (zone, hour), count in analyzer.slot_counts().items():
        i = zone_to_idx.get(zone)
        if i is not None:
            profile[i, hour] = count
    return profile


def save_tables(zones_df: pd.DataFrame, slots_df: pd.DataFrame, outdir) -> list[Path]:
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    zones_path = outdir / "top_zones.csv"
    slots_path = outdir / "top_busy_slots.csv"
    zones_df.to_csv(zones_path, index=False)
    slots_df.to_csv(slots_path, index=False)
    return [zones_path, slots_path]


def save_hour_profile(analyzer: TripAnalyzer, zones, outdir) -> Path:
    """hour_profile() as a CSV: one row per zone, columns 0..23."""
    zones = list(zones)
    df = pd.DataFrame(hour_profile(analyzer, zones), index=pd.Index(zones, name="zone"), columns=range(24))

    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    outpath = outdir / "hour_profile.csv"
    df.to_csv(outpath)
    return outpath


def plot_top_zones(zones_df: pd.DataFrame, outpath) -> Path:
    outpath = Path(outpath)
    outpath.parent.mkdir(parents=True, exist_ok=True)

    plt.figure()
    plt.bar(zones_df["zone"].astype(str), zones_df["count"].values)
    plt.title(f"Top {len(zones_df)} zones by pickups")
    plt.xlabel("Zone")
    plt.ylabel("Pickups")
    plt.xticks(rotation=45, ha="right")
    plt.tight_layout()
    plt.savefig(outpath, dpi=200)
    plt.close()
    return outpath
