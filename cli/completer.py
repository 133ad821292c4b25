"""Custom completer for the PDF Auditor CLI."""

from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS, SORT_COLUMNS


class AuditorCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Column completion for the third token of the 'sort' command
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_words(COMMANDS, tokens[0] if tokens else "")
            return

        if tokens[0].lower() != "sort":
            return

        position = len(tokens) if is_typing_new_token else len(tokens) - 1
        if position != 2:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        yield from self._complete_words(SORT_COLUMNS, current_word)

    def _complete_words(self, words: Iterable[str], partial: str) -> Iterable[Completion]:
        """Complete words matching the partial input."""
        partial_lower = partial.lower()
        for word in words:
            if word.startswith(partial_lower):
                yield Completion(word, start_position=-len(partial))
