"""Tests for the command-line interface."""

import json

import pytest

from guestinsight.cli import main


@pytest.fixture
def reviews_file(tmp_path, sample_reviews):
    path = tmp_path / "reviews.json"
    path.write_text(json.dumps([r.to_dict() for r in sample_reviews]), encoding="utf-8")
    return str(path)


def test_dashboard(reviews_file, capsys):
    main(["dashboard", "--in", reviews_file])
    out = capsys.readouterr().out

    assert "Reviews: 4" in out
    assert "Overall sentiment: 0.60" in out
    assert "Average rating: 3.5/5" in out
    assert "Jan 2024" in out


def test_dashboard_export(reviews_file, tmp_path):
    out_file = tmp_path / "dashboard.json"
    main(["dashboard", "--in", reviews_file, "--out", str(out_file)])

    data = json.loads(out_file.read_text(encoding="utf-8"))
    assert data["dashboard"]["totalReviews"] == 4
    assert data["metadata"]["export_timestamp"]


def test_local_insights(reviews_file, capsys):
    main(["insights", "--in", reviews_file, "--strategy", "local"])
    captured = capsys.readouterr()

    data = json.loads(captured.out)
    assert data["topAspects"][0]["aspect"] == "location"
    assert "Source: local" in captured.err


def test_analyze_local(capsys):
    main(["analyze", "The room was dirty and the staff was rude", "--strategy", "local"])
    data = json.loads(capsys.readouterr().out)
    assert data["score"] == 0.1
    assert data["estimatedRating"] == 1


def test_reviews_filter(reviews_file, capsys):
    main(["reviews", "--in", reviews_file, "--country", "France"])
    out = capsys.readouterr().out

    assert "Showing 2 of 4 reviews" in out
    assert out.index("2024-03-02") < out.index("2024-01-05")


def test_missing_file_exits_with_error(tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        main(["dashboard", "--in", str(tmp_path / "missing.json")])
    assert exc_info.value.code == 1


def test_no_command_prints_help(capsys):
    main([])
    assert "usage" in capsys.readouterr().out.lower()
