"""Assemble flat folder rows and leaf rows into one ordered nested tree.

Pure: takes mappings, returns new dicts, performs no I/O and never mutates
its inputs. Identical inputs always produce identical output.
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional

Node = Dict[str, Any]


def normalize_parent_key(value: Optional[str]) -> Optional[str]:
    """Absent, None and "" all mean the root bucket."""
    return value or None


def _sort_key(node: Mapping[str, Any]) -> int:
    return node.get("sort_order") or 0


def build_tree(
    folders: Iterable[Mapping[str, Any]],
    items: Iterable[Mapping[str, Any]],
    item_key: str = "folder_id",
) -> List[Node]:
    """Merge *folders* and *items* of one scope into root-level tree nodes.

    Folders are grouped by ``parent_id`` and items by *item_key*. Within a
    bucket, folders (each with its own recursively built ``children``) are
    emitted before items and the combined list is then stably sorted by
    ascending ``sort_order``, so ``sort_order`` is the single source of
    sibling order and folders only win ties.

    An item or folder pointing at a folder that is not part of *folders*
    lands at the root. So does a folder whose parent chain leads back to
    itself, which breaks every cycle. Every input row therefore appears
    exactly once in the output.
    """
    folders = list(folders)
    parent_of = {f["id"]: normalize_parent_key(f.get("parent_id")) for f in folders}

    def in_cycle(folder_id: str) -> bool:
        seen = set()
        current = parent_of.get(folder_id)
        while current in parent_of and current not in seen:
            if current == folder_id:
                return True
            seen.add(current)
            current = parent_of[current]
        return False

    def bucket_of(raw: Optional[str], own_id: Optional[str] = None) -> Optional[str]:
        key = normalize_parent_key(raw)
        if key not in parent_of:
            return None
        if own_id is not None and in_cycle(own_id):
            return None
        return key

    folders_by_parent: Dict[Optional[str], List[Mapping[str, Any]]] = defaultdict(list)
    for folder in folders:
        folders_by_parent[bucket_of(folder.get("parent_id"), folder["id"])].append(folder)

    items_by_folder: Dict[Optional[str], List[Mapping[str, Any]]] = defaultdict(list)
    for item in items:
        items_by_folder[bucket_of(item.get(item_key))].append(item)

    def build_level(parent_id: Optional[str]) -> List[Node]:
        nodes: List[Node] = []
        for folder in folders_by_parent.get(parent_id, []):
            node = dict(folder)
            node["type"] = "folder"
            node["children"] = build_level(folder["id"])
            nodes.append(node)
        nodes.extend(dict(item) for item in items_by_folder.get(parent_id, []))
        nodes.sort(key=_sort_key)
        return nodes

    return build_level(None)


def iter_nodes(nodes: Iterable[Mapping[str, Any]]) -> Iterable[Mapping[str, Any]]:
    """Depth-first walk over a built tree, parents before children."""
    for node in nodes:
        yield node
        children = node.get("children")
        if children:
            yield from iter_nodes(children)
