from apps.ward_chart import build_ward_chart, build_ward_chart_frame
from apps.ward_counts import CountSeries, rank, rank_wards
from conftest import WEEK_END, ward_payload


def _ranked():
    series = CountSeries(
        service_code="code-graffiti",
        week_end=WEEK_END,
        counts=ward_payload([10 * ward_id for ward_id in range(1, 51)]),
    )
    return rank_wards(series), rank(series)


def test_chart_frame_labels_extremes() -> None:
    ranked, extremes = _ranked()

    chart_df = build_ward_chart_frame(ranked, extremes)

    labels = dict(zip(chart_df["ward_id"], chart_df["highlight"]))
    assert labels[1] == "Fewest requests"
    assert labels[50] == "Most requests"
    assert labels[25] == "Other wards"
    assert chart_df["ward_display"].iloc[0] == "Ward 1"


def test_chart_has_one_bar_per_ward() -> None:
    ranked, extremes = _ranked()

    figure = build_ward_chart(ranked, extremes, "Graffiti Removal")

    assert sum(len(trace.x) for trace in figure.data) == 50
    assert figure.layout.title.text == "Graffiti Removal: requests by ward"
