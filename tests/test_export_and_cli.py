"""
Tests for the pandas/matplotlib export helpers and the command-line entry.
"""

import json

import numpy as np
import pandas as pd
import pytest

from hotspots.analyzer import TripAnalyzer
from hotspots.export import (
    hour_profile,
    plot_top_zones,
    save_hour_profile,
    save_tables,
    slots_frame,
    zones_frame,
)
from hotspots.top_hotspots import main

LOG = (
    "id,pickup_zone,x,pickup_datetime,y,z\n"
    "1,Downtown,_,2023-01-15 08:12:00,_,_\n"
    "2,Uptown,_,2023-01-15 08:45:00,_,_\n"
    "3,Downtown,_,2023-01-15 09:05:00,_,_\n"
    "4,Downtown,_,not-a-date,_,_\n"
    "5,Downtown,_,2023-01-16 09:40:00,_,_\n"
)


@pytest.fixture
def log_path(tmp_path):
    path = tmp_path / "trips.csv"
    path.write_text(LOG)
    return path


@pytest.fixture
def analyzer(log_path):
    a = TripAnalyzer()
    a.ingest_file(log_path)
    return a


class TestFrames:

    def test_zones_frame(self, analyzer):
        df = zones_frame(analyzer.top_zones(5))
        assert list(df.columns) == ["zone", "count"]
        assert df.to_dict("records") == [
            {"zone": "Downtown", "count": 3},
            {"zone": "Uptown", "count": 1},
        ]

    def test_slots_frame(self, analyzer):
        df = slots_frame(analyzer.top_busy_slots(5))
        assert list(df.columns) == ["zone", "hour", "count"]
        assert df.iloc[0].tolist() == ["Downtown", 9, 2]
        assert len(df) == 3

    def test_empty_frames(self):
        assert zones_frame([]).empty
        assert list(slots_frame([]).columns) == ["zone", "hour", "count"]

    def test_hour_profile(self, analyzer):
        profile = hour_profile(analyzer, ["Downtown", "Nowhere", "Uptown"])
        assert profile.shape == (3, 24)
        assert profile[0, 8] == 1 and profile[0, 9] == 2
        assert profile[1].sum() == 0
        assert profile[2, 8] == 1
        np.testing.assert_array_equal(profile.sum(axis=1), [3, 0, 1])


class TestOutputs:

    def test_save_tables(self, analyzer, tmp_path):
        outdir = tmp_path / "out" / "nested"
        paths = save_tables(
            zones_frame(analyzer.top_zones(5)), slots_frame(analyzer.top_busy_slots(5)), outdir
        )
        assert [p.name for p in paths] == ["top_zones.csv", "top_busy_slots.csv"]
        back = pd.read_csv(paths[0])
        assert back["zone"].tolist() == ["Downtown", "Uptown"]

    def test_save_hour_profile(self, analyzer, tmp_path):
        path = save_hour_profile(analyzer, ["Downtown", "Uptown"], tmp_path / "out")
        assert path.name == "hour_profile.csv"

        back = pd.read_csv(path, index_col="zone")
        assert back.index.tolist() == ["Downtown", "Uptown"]
        assert back.columns.tolist() == [str(h) for h in range(24)]
        assert back.loc["Downtown", "8"] == 1 and back.loc["Downtown", "9"] == 2
        assert back.loc["Uptown"].sum() == 1

    def test_plot_top_zones(self, analyzer, tmp_path):
        out = plot_top_zones(zones_frame(analyzer.top_zones(5)), tmp_path / "figs" / "top.png")
        assert out.exists() and out.stat().st_size > 0


class TestMain:

    def test_run_with_flags(self, log_path, tmp_path, capsys):
        outdir = tmp_path / "report"
        rc = main(["--infile", str(log_path), "--k-zones", "1", "--k-slots", "2", "--outdir", str(outdir)])
        assert rc == 0

        out = capsys.readouterr().out
        assert "1. Downtown: 3" in out
        assert "Uptown" not in out.split("busiest")[0]
        assert (outdir / "top_zones.csv").exists()
        assert len(pd.read_csv(outdir / "top_busy_slots.csv")) == 2
        assert not (outdir / "top_zones.png").exists()

        profile = pd.read_csv(outdir / "hour_profile.csv", index_col="zone")
        assert profile.index.tolist() == ["Downtown"]
        assert profile.loc["Downtown"].sum() == 3

    def test_run_with_config_and_plot(self, log_path, tmp_path):
        outdir = tmp_path / "report"
        cfg = tmp_path / "cfg.json"
        cfg.write_text(json.dumps({"input_path": str(log_path), "outdir": str(outdir), "plot": True}))
        assert main(["--config", str(cfg)]) == 0
        assert (outdir / "top_zones.png").exists()

    def test_flag_overrides_config(self, log_path, tmp_path):
        outdir = tmp_path / "report"
        cfg = tmp_path / "cfg.json"
        cfg.write_text(json.dumps({"input_path": "missing.csv", "outdir": str(outdir)}))
        assert main(["--config", str(cfg), "--infile", str(log_path)]) == 0

    def test_missing_input(self, tmp_path, capsys):
        rc = main(["--infile", str(tmp_path / "nope.csv"), "--outdir", str(tmp_path / "o")])
        assert rc == 1
        assert "does not exist" in capsys.readouterr().out
        assert not (tmp_path / "o").exists()

    def test_no_input_given(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2
        assert "--config or --infile" in capsys.readouterr().err
