from typing import List, TypeVar

T = TypeVar("T")


def move_item(items: List[T], source: int, destination: int) -> List[T]:
    """
    Returns a new list with the item at `source` moved to `destination`.
    Both indexes refer to positions in `items`; the input list is left untouched.

    Raises:
        IndexError: if either index is outside the list
    """
    if not 0 <= source < len(items):
        raise IndexError(f"source index {source} out of range")
    if not 0 <= destination < len(items):
        raise IndexError(f"destination index {destination} out of range")

    reordered = list(items)
    item = reordered.pop(source)
    reordered.insert(destination, item)
    return reordered


def remove_at(items: List[T], index: int) -> List[T]:
    if not 0 <= index < len(items):
        raise IndexError(f"index {index} out of range")
    return [item for i, item in enumerate(items) if i != index]
