import json
import random

import pytest

from stepwalker import CONFIG, ConfigError, Logger, Session, load_settings


def test_defaults_are_copied():
    session = Session(client=None)

    assert session.settings == CONFIG
    session.settings["walking_speed_kmh"] = 99
    assert CONFIG["walking_speed_kmh"] != 99


def test_overrides_applied():
    session = Session(client=None, settings={"default_step_length": 2.5})
    assert session.settings["default_step_length"] == 2.5


def test_unknown_setting_rejected():
    with pytest.raises(ValueError, match="Unknown settings"):
        Session(client=None, settings={"walking_speed": 5})


def test_load_settings(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"walking_speed_kmh": 5.5, "use_walking_speed_variant": False}))

    settings = load_settings(str(path))

    assert settings == {"walking_speed_kmh": 5.5, "use_walking_speed_variant": False}


def test_load_settings_unknown_key(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"step": 1}))

    with pytest.raises(ConfigError):
        load_settings(str(path))


def test_variant_random_stays_within_bounds():
    session = Session(client=None, settings={"walking_speed_kmh": 5.0, "walking_speed_variant": 0.05},
                      rng=random.Random(3), logger=Logger())
    speed = 5.0
    seen = set()
    for _ in range(2000):
        speed = session.variant_random(speed)
        seen.add(round(speed, 4))
        assert 4.95 - 1e-9 <= speed <= 5.05 + 1e-9

    assert len(seen) > 10


def test_variant_random_sometimes_keeps_speed(mocker):
    session = Session(client=None)
    mocker.patch.object(session.rng, "randint", return_value=3)

    assert session.variant_random(4.2) == 4.2


@pytest.mark.parametrize("draw, keeps", [(1, True), (5, True), (6, False), (9, False)])
def test_variant_random_keeps_speed_on_five_of_nine_draws(mocker, draw, keeps):
    session = Session(client=None, settings={"walking_speed_kmh": 4.2, "walking_speed_variant": 0.5})
    mocker.patch.object(session.rng, "randint", return_value=draw)
    mocker.patch.object(session.rng, "random", return_value=0.5)

    assert (session.variant_random(4.2) == 4.2) is keeps
