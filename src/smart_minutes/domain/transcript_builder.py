"""Core business logic for diarized transcript assembly."""

from .models import RecognizedToken, TranscriptSegment


class TranscriptBuilder:
    """Builds speaker-labeled transcripts from recognized word tokens."""

    def assemble(self, tokens: list[RecognizedToken]) -> list[TranscriptSegment]:
        """
        Groups time-ordered tokens into one segment per contiguous speaker run.

        Args:
            tokens: Recognized words in the order the recognizer returned them.

        Returns:
            Segments in token order. An empty token list yields no segments.
        """
        segments: list[TranscriptSegment] = []
        current_speaker: int | None = None
        words: list[str] = []

        for token in tokens:
            if token.speaker_tag != current_speaker:
                if current_speaker is not None:
                    segments.append(self._segment(current_speaker, words))
                current_speaker = token.speaker_tag
                words = []
            words.append(token.text)

        if current_speaker is not None:
            segments.append(self._segment(current_speaker, words))

        return segments

    def render(self, segments: list[TranscriptSegment]) -> str:
        """Formats segments as one ``Speaker <tag>: <text>`` line each."""
        return "\n".join(f"Speaker {s.speaker_tag}: {s.text}" for s in segments)

    def _segment(self, speaker_tag: int, words: list[str]) -> TranscriptSegment:
        text = "".join(f"{word} " for word in words).rstrip()
        return TranscriptSegment(speaker_tag=speaker_tag, text=text)
