from __future__ import annotations

import argparse
import logging
from pathlib import Path

from hotspots.analyzer import TripAnalyzer
from hotspots.config import HotspotConfig, load_config
from hotspots.export import plot_top_zones, save_hour_profile, save_tables, slots_frame, zones_frame


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Busiest pickup zones and (zone, hour) slots in a trip log")
    ap.add_argument("--config", default=None, help="JSON config file (flags below override it)")
    ap.add_argument("--infile", default=None, help="trip log CSV (header + 6 columns)")
    ap.add_argument("--k-zones", type=int, default=None, help="how many zones to report")
    ap.add_argument("--k-slots", type=int, default=None, help="how many (zone, hour) slots to report")
    ap.add_argument("--outdir", default=None, help="where the CSV tables go")
    ap.add_argument("--plot", action="store_true", default=None, help="also save a bar chart of top zones")
    ap.add_argument("--verbose", action="store_true")
    return ap


def build_config(args) -> HotspotConfig:
    if args.config is not None:
        cfg = load_config(args.config)
    elif args.infile is not None:
        cfg = HotspotConfig(input_path=args.infile)
    else:
        raise ValueError("either --config or --infile is required")

    return cfg.with_overrides(
        input_path=args.infile,
        top_zones=args.k_zones,
        top_slots=args.k_slots,
        outdir=args.outdir,
        plot=args.plot,
    )


def main(argv=None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    if args.config is None and args.infile is None:
        ap.error("either --config or --infile is required")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = build_config(args)

    # the analyzer treats a missing file as "no data", so check here
    infile = Path(cfg.input_path)
    if not infile.is_file():
        print(f"Error: input file {infile} does not exist")
        return 1

    analyzer = TripAnalyzer()
    analyzer.ingest_file(infile)

    zones = analyzer.top_zones(cfg.top_zones)
    slots = analyzer.top_busy_slots(cfg.top_slots)

    print(f"Top {cfg.top_zones} zones by pickups:")
    for i, (zone, count) in enumerate(zones, 1):
        print(f"  {i}. {zone}: {count:,}")

    print(f"\nTop {cfg.top_slots} busiest (zone, hour) slots:")
    for i, (zone, hour, count) in enumerate(slots, 1):
        print(f"  {i}. {zone} @ {hour:02d}:00: {count:,}")

    zones_df = zones_frame(zones)
    slots_df = slots_frame(slots)
    for p in save_tables(zones_df, slots_df, cfg.outdir):
        print(f"Saved: {p}")
    print(f"Saved: {save_hour_profile(analyzer, [z.zone for z in zones], cfg.outdir)}")

    if cfg.plot and len(zones_df) > 0:
        out = plot_top_zones(zones_df, Path(cfg.outdir) / "top_zones.png")
        print(f"Saved: {out}")

    stats = analyzer.ingest_stats
    if stats is not None:
        print(f"Rows: {stats.lines_read:,} | kept: {stats.records_kept:,} | skipped: {stats.records_skipped:,}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
