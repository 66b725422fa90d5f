"""Category tree assembly.

The tree is rebuilt from the flat category list on every request; the
id -> node map lives only for the duration of one call.
"""

from __future__ import annotations

from vodcatalog.models.domain import CategoryEntity
from vodcatalog.models.types import CategoryNode


def build_category_tree(categories: list[CategoryEntity]) -> list[CategoryNode]:
    """Assemble categories into a forest.

    Rows with type_pid == 0 become roots. Any other row is appended to its
    parent's children when the parent is among ``categories``; otherwise it
    is left out of the tree. Input order is kept within each level.

    Args:
        categories: Flat category list, usually ordered by (type_pid, type_id).

    Returns:
        Root nodes with nested children.
    """
    nodes = {
        c.type_id: CategoryNode(
            type_id=c.type_id,
            type_pid=c.type_pid,
            type_name=c.type_name,
            updated_at=c.updated_at,
        )
        for c in categories
    }

    tree: list[CategoryNode] = []
    for c in categories:
        node = nodes[c.type_id]
        if c.type_pid == 0:
            tree.append(node)
        elif c.type_pid in nodes:
            nodes[c.type_pid].children.append(node)
    return tree
