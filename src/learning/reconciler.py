"""
Keeps the legacy `completedModules` / `completedModulesWithScore` fields in
step with the per-module progress map. Called by the persistence layer right
before every write of a user's progress.
"""

from __future__ import annotations

from learning.types import CompletedModuleEntry, ProgressState


def reconcile(state: ProgressState) -> bool:
    """
    Rebuild the legacy mirrors from module_progress. Returns True when
    anything changed; a second call in a row always returns False.
    """
    changed = False

    completed_ids = list(dict.fromkeys(state.completed_module_ids()))
    if completed_ids != state.completed_modules:
        state.completed_modules = completed_ids
        changed = True

    completed = set(completed_ids)
    kept: list[CompletedModuleEntry] = []
    seen: set[str] = set()
    for entry in state.completed_modules_with_score:
        if entry.module_id not in completed or entry.module_id in seen:
            changed = True
            continue
        seen.add(entry.module_id)
        progress = state.module_progress[entry.module_id]
        if progress.final_score is not None and entry.score != progress.final_score:
            entry.score = progress.final_score
            changed = True
        kept.append(entry)

    for module_id in completed_ids:
        if module_id in seen:
            continue
        progress = state.module_progress[module_id]
        if progress.final_score is None:
            continue
        kept.append(
            CompletedModuleEntry(
                module_id=module_id,
                score=progress.final_score,
                completed_at=progress.completed_at or progress.started_at,
            )
        )
        changed = True

    state.completed_modules_with_score = kept
    return changed
