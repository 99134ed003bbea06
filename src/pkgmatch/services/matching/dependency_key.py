"""Canonical dependency keys for compiled packages.

A dependency key captures the transitive build-time closure of a package as
nested ``[name, version]`` / ``[name, version, [children...]]`` lists in
declaration order, rendered as compact JSON. Keys are stored when a compiled
package is produced and later compared as opaque strings, so the rendering
below must stay byte-for-byte stable. Any change to it is a breaking change
and must bump ``DEPENDENCY_KEY_FORMAT``.
"""

import json
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

DEPENDENCY_KEY_FORMAT = 1


class DependencyNode(Protocol):
    name: str
    version: str
    dependencies: Sequence[str]


def serialize_dependency_key(
    entry: DependencyNode, request_index: Mapping[str, DependencyNode]
) -> str:
    """Render the dependency key of ``entry``.

    Args:
        entry: The package whose closure is being keyed.
        request_index: Every package of the current request, by name.

    Returns:
        The compact JSON key, e.g. ``[["p2","v2"],["p3","v3"]]``.
    """
    closure = _expand(entry, request_index, frozenset({entry.name}))
    return json.dumps(closure, separators=(",", ":"), ensure_ascii=False)


def _expand(
    entry: DependencyNode,
    request_index: Mapping[str, DependencyNode],
    path: frozenset[str],
) -> list[list[Any]]:
    expanded: list[list[Any]] = []
    for dep_name in entry.dependencies:
        dep = request_index.get(dep_name)
        if dep is None:
            expanded.append([dep_name, None])
            continue
        if dep_name in path or not _has_resolvable_dependency(dep, request_index):
            expanded.append([dep.name, dep.version])
            continue
        expanded.append(
            [dep.name, dep.version, _expand(dep, request_index, path | {dep_name})]
        )
    return expanded


def _has_resolvable_dependency(
    entry: DependencyNode, request_index: Mapping[str, DependencyNode]
) -> bool:
    return any(name in request_index for name in entry.dependencies)
