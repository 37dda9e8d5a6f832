"""
System endpoints - task introspection
"""

from typing import Any, Dict

from fastapi import APIRouter

from dotswarm.lifecycle.task_registry import TaskRegistry

router = APIRouter(prefix="/system", tags=["System"])


@router.get("/tasks")
async def get_all_tasks() -> Dict[str, Any]:
    """
    Tracked background tasks (capture, render, input, API) and their status.
    """
    registry = TaskRegistry.instance()
    tasks = [
        {
            "id": r.info.id,
            "category": r.info.category.name,
            "description": r.info.description,
            "created_at": r.info.created_at,
            "status": r.status,
            "error": str(r.finished_with_error) if r.finished_with_error else None,
        }
        for r in registry.list_all()
    ]
    return {
        "summary": registry.summary(),
        "count": len(tasks),
        "tasks": tasks,
    }
