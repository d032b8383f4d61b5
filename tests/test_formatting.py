from racereplay.formatting import format_distance, format_pace, format_speed, format_time


def test_format_speed():
    assert format_speed(36) == "36.0 km/h"
    assert format_speed(12.345) == "12.3 km/h"


def test_format_pace():
    assert format_pace(12) == "5:00"
    assert format_pace(10) == "6:00"
    assert format_pace(11) == "5:27"
    assert format_pace(0) == "--:--"
    assert format_pace(-3) == "--:--"


def test_format_pace_never_shows_sixty_seconds():
    # 60 / 11.999 = 5.0004 min -> rounds to 5:00, not 4:60 or 5:60
    assert format_pace(11.999) == "5:00"
    assert format_pace(12.001) == "5:00"


def test_format_time():
    assert format_time(0) == "0:00"
    assert format_time(125.9) == "2:05"
    assert format_time(3725) == "62:05"


def test_format_distance():
    assert format_distance(1500) == "1.50 km"
