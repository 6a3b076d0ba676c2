from backend.calmchef.core.durations import format_time, parse_duration
from backend.calmchef.core.pacing import PacingTracker


def test_parse_duration():
    assert parse_duration(300) == 300
    assert parse_duration("10 mins") == 600
    assert parse_duration("1 hour") == 3600
    assert parse_duration("2 hrs") == 7200
    assert parse_duration("45 seconds") == 45
    assert parse_duration("90") == 90
    assert parse_duration("3 whistles") == 300
    assert parse_duration("a while") == 0
    assert parse_duration(None) == 0
    assert parse_duration("") == 0


def test_format_time():
    assert format_time(0) == "0:00"
    assert format_time(65) == "1:05"
    assert format_time(600) == "10:00"


def test_weighted_average_of_clamped_ratios():
    pacing = PacingTracker()

    assert pacing.record_step_time("5 mins", 600)
    assert pacing.multiplier == 1.3

    # 10x slower is clamped to 3x
    assert pacing.record_step_time(60, 600)
    assert pacing.multiplier == 1.81
    assert pacing.samples == 2


def test_ignored_samples():
    pacing = PacingTracker()

    assert not pacing.record_step_time(600, 900, is_fixed_time=True)
    assert not pacing.record_step_time(600, 3)
    assert not pacing.record_step_time(None, 120)
    assert pacing.multiplier == 1.0
    assert pacing.samples == 0


def test_adjust_only_scales_active_steps():
    pacing = PacingTracker(multiplier=1.5)

    assert pacing.adjust(120) == 180
    assert pacing.adjust(600, is_fixed_time=True) == 600


def test_profile_round_trip():
    pacing = PacingTracker.from_profile({"pacingMultiplier": 0.8, "samples": 4})

    assert pacing.multiplier == 0.8
    assert PacingTracker.from_profile(None).multiplier == 1.0
    assert pacing.to_profile() == {"pacingMultiplier": 0.8, "samples": 4}


def test_unreadable_profile_falls_back_to_defaults():
    for profile in ("fast", {"pacingMultiplier": "quick"}, {"pacingMultiplier": -1}, ["1.2"]):
        pacing = PacingTracker.from_profile(profile)
        assert pacing.multiplier == 1.0
        assert pacing.samples == 0

    assert PacingTracker.from_profile({"pacingMultiplier": "1.4"}).multiplier == 1.4
