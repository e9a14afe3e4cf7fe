from __future__ import annotations

import pytest

from pycadence.filters import ChannelMix, Equalizer, Karaoke, LowPass, Rotation, Timescale, Vibrato, Volume


class TestParameterFilters:
    def test_default_filter_is_off_and_sends_nothing(self) -> None:
        timescale = Timescale()
        assert timescale.off
        assert timescale.get() == {}

    def test_get_uses_node_keys_and_skips_unset(self) -> None:
        karaoke = Karaoke(level=0.5, mono_level=1.0)
        assert karaoke.changed
        assert karaoke.get() == {"level": 0.5, "monoLevel": 1.0}
        assert Rotation(hertz=0.2).get() == {"rotationHz": 0.2}

    def test_bounds_are_enforced(self) -> None:
        with pytest.raises(ValueError):
            Timescale(speed=0)
        with pytest.raises(ValueError):
            Vibrato(frequency=15)
        with pytest.raises(ValueError):
            LowPass(smoothing=1.0)

    def test_unknown_settings_are_rejected(self) -> None:
        with pytest.raises(TypeError):
            Karaoke(pitch=1.0)

    def test_equality_and_round_trip(self) -> None:
        mix = ChannelMix(left_to_left=0.5, right_to_right=0.5)
        assert ChannelMix.from_dict(mix.to_dict()) == mix
        assert mix != ChannelMix()

    def test_reset(self) -> None:
        timescale = Timescale(speed=1.5)
        timescale.reset()
        assert timescale.off


class TestEqualizer:
    def test_flat_equalizer_is_off(self) -> None:
        assert Equalizer.flat().get() == []

    def test_gains_are_clamped(self) -> None:
        equalizer = Equalizer(levels=[{"band": 0, "gain": 5.0}, {"band": 1, "gain": -1.0}])
        assert equalizer.get_gain(0) == 1.0
        assert equalizer.get_gain(1) == -0.25
        assert len(equalizer.get()) == 15

    def test_missing_band(self) -> None:
        with pytest.raises(IndexError):
            Equalizer().set_gain(15, 0.1)

    def test_name_is_ignored_for_equality(self) -> None:
        assert Equalizer(name="a") == Equalizer(name="b")


class TestVolume:
    def test_from_percentage(self) -> None:
        volume = Volume.from_percentage(150)
        assert volume.get() == 1.5
        assert volume.get_int_value() == 150

    def test_capped_at_five(self) -> None:
        assert Volume(10).get() == 5.0

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            Volume(-0.1)
