"""
Tests for the progressive reveal task.
"""
import pytest

from refaq.cli.reveal import ProgressiveReveal


class TestProgressiveReveal:
    """Test word-by-word reveal."""

    def test_frames_grow_word_by_word(self):
        reveal = ProgressiveReveal("reUSD yields six percent", word_delay=0)

        frames = list(reveal.frames())

        assert frames == [
            "reUSD",
            "reUSD yields",
            "reUSD yields six",
            "reUSD yields six percent",
        ]
        assert reveal.done is True

    def test_newlines_are_preserved(self):
        text = "**Title:**\n• one two"
        frames = list(ProgressiveReveal(text, word_delay=0).frames())
        assert frames[-1] == text

    def test_cancel_stops_iteration(self):
        reveal = ProgressiveReveal("one two three four", word_delay=0)
        frames = []
        for frame in reveal.frames():
            frames.append(frame)
            if len(frames) == 2:
                reveal.cancel()

        assert frames == ["one", "one two"]
        assert reveal.cancelled is True
        assert reveal.done is False

    def test_cancel_before_start_yields_nothing(self):
        reveal = ProgressiveReveal("one two", word_delay=0)
        reveal.cancel()
        assert list(reveal.frames()) == []

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            ProgressiveReveal("text", word_delay=-1)
