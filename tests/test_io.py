from __future__ import annotations

import json

import matplotlib.pyplot as plt
import pandas as pd
import plotly.graph_objects as go
import pytest

from trial_summary.utils.io import load_dataframe, save_json
from trial_summary.utils.plotting import save_figure


def test_load_dataframe_csv(tmp_path) -> None:
    path = tmp_path / "fields.csv"
    pd.DataFrame({"identifier": ["a"], "label": ["A"], "form": ["F"]}).to_csv(path, index=False)

    df = load_dataframe(path)

    assert list(df.columns) == ["identifier", "label", "form"]


def test_load_dataframe_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_dataframe(tmp_path / "absent.csv")


def test_load_dataframe_unsupported_suffix(tmp_path) -> None:
    path = tmp_path / "fields.txt"
    path.write_text("identifier\n", encoding="utf-8")

    with pytest.raises(ValueError, match=".txt"):
        load_dataframe(path)


def test_save_json_creates_parent(tmp_path) -> None:
    path = tmp_path / "nested" / "stats.json"

    save_json({"mean": 1.5, "when": pd.Timestamp("2024-01-01")}, path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["mean"] == 1.5
    assert data["when"].startswith("2024-01-01")


def test_save_figure_picks_suffix_by_backend(tmp_path) -> None:
    fig, ax = plt.subplots()
    ax.plot([1, 2], [3, 4])
    plt.close(fig)

    png = save_figure(fig, tmp_path / "figures" / "histogram")
    html = save_figure(go.Figure(go.Bar(x=["a"], y=[1])), tmp_path / "figures" / "factor")

    assert png.name == "histogram.png" and png.exists()
    assert html.name == "factor.html" and html.exists()


def test_save_figure_rejects_other_objects(tmp_path) -> None:
    with pytest.raises(TypeError):
        save_figure(pd.DataFrame(), tmp_path / "frame")


def test_save_figure_keeps_dotted_names_apart(tmp_path) -> None:
    written = []
    for name in ["histogram_score.v1", "histogram_score.v2"]:
        fig, ax = plt.subplots()
        plt.close(fig)
        written.append(save_figure(fig, tmp_path / name))

    assert [path.name for path in written] == ["histogram_score.v1.png", "histogram_score.v2.png"]
    assert all(path.exists() for path in written)
