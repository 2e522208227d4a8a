"""Group due review tasks by the material or subject they came from."""
import logging
from datetime import date
from typing import Optional

from studylog.errors import NotFound
from studylog.models import DueTask, ReviewMaterial, StudySession, TaskGroup
from studylog.scheduler import due_tasks

logger = logging.getLogger(__name__)


def resolve_material(material_id: str, materials: dict) -> ReviewMaterial:
    """Look up a material by id in a ``{id: ReviewMaterial}`` mapping."""
    try:
        return materials[material_id]
    except KeyError:
        raise NotFound(f"review material {material_id!r} not found") from None


def session_key(session: StudySession, material: Optional[ReviewMaterial]) -> tuple[str, str]:
    """Return ``(key, title)`` for a session and its looked-up material.

    A session linked to a known material keys on that material; a session
    without one, or whose material is gone, keys on its subject.
    """
    if session.material_id is not None:
        if material is not None and material.id == session.material_id:
            return f"material:{material.id}", material.title
        logger.debug(
            "material %s for session %s unavailable, using subject",
            session.material_id, session.id,
        )
    return f"subject:{session.subject}", session.subject


def group_key(row: DueTask) -> tuple[str, str]:
    return session_key(row.session, row.material)


def group_due_tasks(rows) -> list[TaskGroup]:
    """Partition joined due tasks into groups, in first-seen key order.

    ``rows`` should already be in due order (see ``scheduler.due_tasks``);
    the group holding the most overdue task then comes first.
    """
    groups: dict[str, TaskGroup] = {}
    for row in rows:
        key, title = group_key(row)
        group = groups.get(key)
        if group is None:
            group = groups[key] = TaskGroup(key=key, title=title)
        group.due_tasks.append(row.task)
    return list(groups.values())


def join_due_tasks(tasks, sessions, materials, as_of: date) -> list[DueTask]:
    """Select due tasks and join each with its session and material.

    ``sessions`` and ``materials`` may be sequences or ``{id: record}``
    mappings. A task whose session is missing raises ``NotFound``; a missing
    material only drops the link.
    """
    sessions_by_id = sessions if isinstance(sessions, dict) else {s.id: s for s in sessions}
    materials_by_id = materials if isinstance(materials, dict) else {m.id: m for m in materials}
    rows = []
    for task in due_tasks(tasks, as_of):
        session = sessions_by_id.get(task.session_id)
        if session is None:
            raise NotFound(f"study session {task.session_id!r} for task {task.id} not found")
        material = None
        if session.material_id is not None:
            try:
                material = resolve_material(session.material_id, materials_by_id)
            except NotFound:
                logger.debug("task %s: material %s not found", task.id, session.material_id)
        rows.append(DueTask(task=task, session=session, material=material))
    return rows
