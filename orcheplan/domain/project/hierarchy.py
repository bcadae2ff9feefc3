"""Pure walks over the project forest.

All functions take an id-keyed mapping of every project and follow
``parent_project_id`` links by lookup. Walks are bounded by the number of
projects so a corrupted cycle is reported instead of looping forever.
"""

from collections.abc import Iterable, Mapping

from orcheplan.domain.project.models import Project
from orcheplan.domain.shared.errors import DomainError, ErrorKind, fail
from orcheplan.domain.shared.result import Err, Ok


def ancestors(
    projects: Mapping[str, Project],
    project_id: str,
) -> Ok[list[str]] | Err[DomainError]:
    """List the ancestors of a project, nearest first.

    A parent id that does not resolve ends the chain.

    Returns:
        Ok(list of ancestor ids), or Err(GraphCorruption) if the chain
        is longer than the number of projects.
    """
    chain: list[str] = []
    current = projects.get(project_id)
    bound = len(projects)
    while current is not None and current.parent_project_id is not None:
        if len(chain) >= bound:
            return fail(
                ErrorKind.GRAPH_CORRUPTION,
                f"project parent chain from {project_id} does not terminate",
            )
        chain.append(current.parent_project_id)
        current = projects.get(current.parent_project_id)
    return Ok(chain)


def check_project_parent(
    projects: Mapping[str, Project],
    project_id: str,
    parent_id: str | None,
) -> Ok[None] | Err[DomainError]:
    """Validate that ``parent_id`` may become the parent of ``project_id``.

    Walks upward from the candidate parent; reaching ``project_id`` means
    the move would make the project its own ancestor.
    """
    if parent_id is None:
        return Ok(None)
    if parent_id not in projects:
        return fail(ErrorKind.INVALID_REFERENCE, f"parent project {parent_id} not found")
    if parent_id == project_id:
        return fail(ErrorKind.CYCLE_DETECTED, f"project {project_id} cannot be its own parent")

    chain = ancestors(projects, parent_id)
    if isinstance(chain, Err):
        return chain
    if project_id in chain.value:
        return fail(
            ErrorKind.CYCLE_DETECTED,
            f"project {parent_id} is a descendant of {project_id}",
        )
    return Ok(None)


def subprojects_depth_first(
    projects: Mapping[str, Project],
    root_id: str,
) -> Ok[list[str]] | Err[DomainError]:
    """List a project and all its descendants, children before parents.

    This is the order in which a cascading delete must remove them.
    """
    children: dict[str, list[Project]] = {}
    for project in projects.values():
        if project.parent_project_id is not None:
            children.setdefault(project.parent_project_id, []).append(project)

    order: list[str] = []
    visited: set[str] = set()
    # (id, expanded) pairs; a node is emitted on its second visit
    stack: list[tuple[str, bool]] = [(root_id, False)]
    while stack:
        node_id, expanded = stack.pop()
        if expanded:
            order.append(node_id)
            continue
        if node_id in visited:
            return fail(
                ErrorKind.GRAPH_CORRUPTION,
                f"project {node_id} reached twice below {root_id}",
            )
        visited.add(node_id)
        stack.append((node_id, True))
        for child in sorted(children.get(node_id, []), key=lambda p: p.seq, reverse=True):
            stack.append((child.id, False))
    return Ok(order)


def with_ancestors(
    projects: Mapping[str, Project],
    seeds: Iterable[str],
) -> Ok[set[str]] | Err[DomainError]:
    """Close a set of project ids over their ancestors."""
    closed: set[str] = set()
    for project_id in seeds:
        if project_id not in projects:
            continue
        closed.add(project_id)
        chain = ancestors(projects, project_id)
        if isinstance(chain, Err):
            return chain
        closed.update(pid for pid in chain.value if pid in projects)
    return Ok(closed)
