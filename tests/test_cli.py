import pytest

from racereplay.cli import build_parser, main


def _standing_lines(output):
    return [line for line in output.splitlines() if line.strip()[:2].rstrip(".").isdigit()]


def test_info_sample(capsys):
    main(["info", "--sample"])
    out = capsys.readouterr().out
    assert "Morning Run with Sarah" in out
    assert "Distance:  3.20 km" in out
    assert "Duration:  30:00" in out


def test_standings_sample(capsys):
    main(["standings", "--sample", "--at", "900"])
    lines = _standing_lines(capsys.readouterr().out)
    assert len(lines) == 4
    assert "Tom Wilson" in lines[0]
    assert "Anna Peterson" in lines[-1]


def test_standings_at_end_flags_finishers(capsys):
    main(["standings", "--sample", "--at", "5000"])
    lines = _standing_lines(capsys.readouterr().out)
    assert all("FINISHED" in line for line in lines)


def test_unreadable_file_is_reported(capsys, tmp_path):
    bad = tmp_path / "broken.gpx"
    bad.write_text("<gpx><trk>")
    with pytest.raises(SystemExit):
        main(["info", str(bad)])
    out = capsys.readouterr().out
    assert "ERROR" in out and "broken.gpx" in out


def test_unsupported_extension(capsys, tmp_path):
    other = tmp_path / "track.tcx"
    other.write_text("")
    with pytest.raises(SystemExit):
        main(["info", str(other)])
    assert "Unsupported file type" in capsys.readouterr().out


def test_no_command_prints_help():
    with pytest.raises(SystemExit):
        main([])


def test_race_options_parse():
    args = build_parser().parse_args(["race", "a.gpx", "--speed", "2", "--strava", "123"])
    assert args.files == ["a.gpx"]
    assert args.speed == 2
    assert args.strava == ["123"]


class FakeTime:
    def __init__(self):
        self.now = 0.0

    def monotonic(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


def test_race_runs_to_the_finish(capsys, monkeypatch):
    from types import SimpleNamespace

    from racereplay import playback

    fake = FakeTime()
    monkeypatch.setattr(playback, "time_mod",
                        SimpleNamespace(monotonic=fake.monotonic, sleep=fake.sleep))

    main(["race", "--sample", "--speed", "5", "--seek", "1400", "--fps", "10"])
    out = capsys.readouterr().out

    final = out[out.rindex("■"):]
    assert "35:00 / 35:00" in final
    lines = _standing_lines(final)
    assert len(lines) == 4
    assert all("FINISHED" in line for line in lines)
    # periodic standings were printed while playing
    assert "▶" in out


def test_race_rejects_zero_speed(capsys):
    with pytest.raises(SystemExit):
        main(["race", "--sample", "--speed", "0"])
    assert "Error:" in capsys.readouterr().out
