"""Core business logic for stitching partial transcripts together."""

from typing import TYPE_CHECKING, Literal

from dictation.domain.models import MergedTranscript, Word

if TYPE_CHECKING:
    from dictation.db_models import Transcript

MergeOrder = Literal["created_at", "chunk_start"]


class TranscriptMerger:
    """Merges partial transcripts into one text and one word list."""

    def __init__(self, order: MergeOrder = "created_at"):
        self._order = order

    def merge(self, partials: list["Transcript"]) -> MergedTranscript:
        """
        Concatenates partial texts and word lists in merge order.

        Partials are expected in creation order (as the repository returns
        them). With the `chunk_start` strategy they are re-sorted by the
        declared start offset of their originating chunk, keeping creation
        order for ties and for partials without an offset.

        Args:
            partials: Partial transcripts of a single session.

        Returns:
            MergedTranscript with space-joined text, concatenated words and
            the number of partials merged.
        """
        ordered = self._ordered(partials)

        text = " ".join(p.text for p in ordered)
        words: list[Word] = []
        for partial in ordered:
            words.extend(partial.word_list())

        return MergedTranscript(text=text, words=words, partial_count=len(ordered))

    def _ordered(self, partials: list["Transcript"]) -> list["Transcript"]:
        if self._order == "created_at":
            return list(partials)
        # sorted() is stable, so equal offsets keep creation order
        return sorted(
            partials,
            key=lambda p: (
                p.chunk_start_time is None,
                p.chunk_start_time or 0.0,
            ),
        )
