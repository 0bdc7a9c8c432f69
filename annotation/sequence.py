"""Ordered annotation list for one editing session"""

from typing import Any, Dict, Iterable, Iterator, List

from annotation.tokens import AnnotationToken


class AnnotationSequence:
    """
    Insertion-ordered list of AnnotationToken.

    Position is the identity of an element; identical tokens may appear
    more than once. Out-of-range indices never raise: list actions from the
    UI can arrive after the list has already changed.
    """

    def __init__(self, tokens: Iterable[AnnotationToken] = ()):
        self._items: List[AnnotationToken] = list(tokens)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[AnnotationToken]:
        return iter(self._items)

    def __getitem__(self, index: int) -> AnnotationToken:
        return self._items[index]

    def __repr__(self) -> str:
        return f"AnnotationSequence({self.tokens()!r})"

    def _in_bounds(self, index: int) -> bool:
        return 0 <= index < len(self._items)

    def append(self, token: AnnotationToken) -> None:
        self._items.append(token)

    def remove_at(self, index: int) -> None:
        """Remove the element at index; out of bounds is a no-op"""
        if self._in_bounds(index):
            del self._items[index]

    def move_to(self, from_index: int, to_index: int) -> None:
        """
        Move the element at from_index so it ends up at to_index.

        to_index is clamped into [0, len-1] before the element is removed and
        is then used as the insertion position in the shortened list, so
        moving element 0 to 2 in a 3-element list places it last. An invalid
        from_index leaves the sequence unchanged.
        """
        if not self._in_bounds(from_index):
            return
        target = max(0, min(to_index, len(self._items) - 1))
        item = self._items.pop(from_index)
        self._items.insert(target, item)

    def move_up(self, index: int) -> None:
        self.move_to(index, index - 1)

    def move_down(self, index: int) -> None:
        self.move_to(index, index + 1)

    def drop(self, dragged_index: int, target_index: int) -> None:
        """Drag-and-drop onto a row"""
        self.move_to(dragged_index, target_index)

    def drop_on_tail(self, dragged_index: int) -> None:
        """Drag-and-drop onto the list area below the last row"""
        self.move_to(dragged_index, len(self._items) - 1)

    def clear(self) -> None:
        self._items.clear()

    def replace(self, tokens: Iterable[AnnotationToken]) -> None:
        self._items = list(tokens)

    def tokens(self) -> List[str]:
        return [item.token for item in self._items]

    def to_records(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self._items]
