"""Word-level transcript edits."""

from dictation.domain.models import Word


def accept_alternative(
    words: list[Word], word_index: int, accepted_text: str
) -> tuple[list[Word], str]:
    """
    Replaces one word's text and re-derives the transcript text.

    Args:
        words: Current word list of the transcript.
        word_index: Zero-based index of the word to replace.
        accepted_text: The reading the user accepted.

    Returns:
        Tuple of (updated word list, text rebuilt from all words).

    Raises:
        IndexError: If word_index does not address a word.
    """
    if not 0 <= word_index < len(words):
        raise IndexError(word_index)

    updated = list(words)
    updated[word_index] = words[word_index].model_copy(
        update={"text": accepted_text, "user_edited": True}
    )
    return updated, " ".join(w.text for w in updated)


def low_confidence_words(words: list[Word], threshold: float) -> list[Word]:
    """Returns the words whose confidence falls below the threshold."""
    return [w for w in words if w.confidence < threshold]
