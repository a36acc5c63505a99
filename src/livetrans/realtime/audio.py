# realtime/audio.py
"""
Helper functions for audio sent upstream
"""

import numpy as np

REALTIME_SAMPLE_RATE = 24000  # OpenAI Realtime expects 24kHz PCM16


def resample_pcm16(audio: bytes, from_rate: int, to_rate: int = REALTIME_SAMPLE_RATE) -> bytes:
    """
    Resample mono PCM16 audio with linear interpolation.

    Args:
        audio: PCM16 little-endian bytes
        from_rate: Input sample rate
        to_rate: Output sample rate (default: 24000)

    Returns:
        Resampled PCM16 bytes
    """
    if len(audio) < 2:
        return b""

    # Drop a trailing odd byte
    samples = np.frombuffer(audio[: len(audio) - len(audio) % 2], dtype="<i2")

    if from_rate == to_rate:
        return samples.tobytes()

    duration = len(samples) / from_rate
    target_len = max(1, int(round(duration * to_rate)))

    source_x = np.arange(len(samples), dtype=np.float64)
    target_x = np.linspace(0, len(samples) - 1, num=target_len)
    resampled = np.interp(target_x, source_x, samples.astype(np.float64))

    return np.clip(np.round(resampled), -32768, 32767).astype("<i2").tobytes()
