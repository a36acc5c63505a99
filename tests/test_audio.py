import numpy as np

from livetrans.realtime.audio import resample_pcm16


def _pcm(samples) -> bytes:
    return np.asarray(samples, dtype="<i2").tobytes()


def test_resample_empty_and_odd_input() -> None:
    assert resample_pcm16(b"", 16000) == b""
    assert resample_pcm16(b"\x01", 16000) == b""


def test_resample_same_rate_is_identity() -> None:
    audio = _pcm([1, -2, 3, 32767])
    assert resample_pcm16(audio, 24000, 24000) == audio


def test_resample_drops_trailing_odd_byte() -> None:
    audio = _pcm([5, 6]) + b"\x07"
    assert resample_pcm16(audio, 24000, 24000) == _pcm([5, 6])


def test_resample_16k_to_24k_length_and_range() -> None:
    samples = np.linspace(-32768, 32767, num=1600).astype("<i2")
    out = np.frombuffer(resample_pcm16(samples.tobytes(), 16000), dtype="<i2")
    assert len(out) == 2400
    assert out[0] == samples[0]
    assert out[-1] == samples[-1]
    assert out.min() >= -32768
    assert out.max() <= 32767


def test_resample_constant_signal_stays_constant() -> None:
    out = np.frombuffer(resample_pcm16(_pcm([1000] * 480), 48000), dtype="<i2")
    assert len(out) == 240
    assert set(out.tolist()) == {1000}
