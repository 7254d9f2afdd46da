"""Ordered source list operations.

All functions are pure: they return a new list and never mutate the input.
A ``None`` result means the operation was a no-op and nothing should be
persisted.
"""

from aiocatalogs.modules.catalogs.domain.entities import CatalogSource


def index_of(sources: list[CatalogSource], source_id: str) -> int:
    for index, source in enumerate(sources):
        if source.id == source_id:
            return index
    return -1


def upsert_source(
    sources: list[CatalogSource], source: CatalogSource
) -> tuple[list[CatalogSource], bool]:
    """Replace a source with the same id in place, or append it.

    A replacement keeps the custom name and randomize flag the user set on the
    previous entry unless the new source sets its own. Returns the new list
    and whether an existing entry was replaced.
    """
    updated = list(sources)
    index = index_of(updated, source.id)
    if index >= 0:
        previous = updated[index]
        updated[index] = source.model_copy(
            update={
                "custom_name": source.custom_name or previous.custom_name,
                "randomize": source.randomize or previous.randomize,
            }
        )
        return updated, True
    updated.append(source)
    return updated, False


def remove_source(
    sources: list[CatalogSource], source_id: str
) -> list[CatalogSource] | None:
    updated = [s for s in sources if s.id != source_id]
    if len(updated) == len(sources):
        return None
    return updated


def move_source(
    sources: list[CatalogSource], source_id: str, offset: int
) -> list[CatalogSource] | None:
    """Swap a source with its neighbour ``offset`` positions away (+1 or -1)."""
    index = index_of(sources, source_id)
    target = index + offset
    if index < 0 or target < 0 or target >= len(sources):
        return None
    updated = list(sources)
    updated[index], updated[target] = updated[target], updated[index]
    return updated


def rename_source(
    sources: list[CatalogSource], source_id: str, name: str
) -> list[CatalogSource] | None:
    """Set the custom display name of a source; a blank name clears it."""
    index = index_of(sources, source_id)
    if index < 0:
        return None
    updated = list(sources)
    updated[index] = updated[index].model_copy(
        update={"custom_name": name.strip() or None}
    )
    return updated


def toggle_randomize(
    sources: list[CatalogSource], source_id: str
) -> list[CatalogSource] | None:
    index = index_of(sources, source_id)
    if index < 0:
        return None
    updated = list(sources)
    current = updated[index]
    updated[index] = current.model_copy(update={"randomize": not current.randomize})
    return updated
