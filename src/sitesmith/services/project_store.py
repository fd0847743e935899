import logging
import threading
from typing import Any, List, Optional

from src.sitesmith.executor.code_sanitizer import CodeSanitizer
from src.sitesmith.models.event_types import (
    GENERATION_COMPLETED,
    GENERATION_FAILED,
    GENERATION_STARTED,
    PROJECTS_CHANGED,
)
from src.sitesmith.models.events import Event
from src.sitesmith.models.project import (
    Message,
    StoreSnapshot,
    WebsiteProject,
    derive_project_name,
    new_project,
)
from src.sitesmith.services.project_persistence_service import ProjectStorage

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class ProjectStore:
    """
    Owns the website projects, the active selection and the generation workflow.

    Responsibilities:
    - Guarantee at least one project exists and the active id always points at one.
    - Persist every change to the collection or the selection right away.
    - Run a generation per message: record the prompt, call the completion
      client, then commit the document or roll the project back.

    Only one generation runs at a time. The lock is released during the
    network call, so projects can still be created, selected and deleted
    while a generation is pending; its result is applied by project id.
    """

    def __init__(
        self,
        storage: ProjectStorage,
        completion_client: Any,
        *,
        sanitizer: Optional[CodeSanitizer] = None,
        event_bus: Optional[Any] = None,
    ) -> None:
        self.storage = storage
        self.completion_client = completion_client
        self.sanitizer = sanitizer or CodeSanitizer()
        self.event_bus = event_bus

        self._lock = threading.RLock()
        self._projects: List[WebsiteProject] = []
        self._active_project_id: Optional[str] = None
        self._is_loading = False
        self._last_error: Optional[str] = None

        self._initialize()

    # ------------------- Boot -------------------
    def _initialize(self) -> None:
        snapshot = self.storage.load()
        projects = self._drop_duplicate_ids(snapshot.projects)
        active_id = snapshot.active_project_id

        if not projects:
            default_project = new_project()
            projects = [default_project]
            active_id = default_project.id
            logger.info("No saved projects found; created default project %s.", active_id)
        elif not any(project.id == active_id for project in projects):
            logger.info("Saved active project %r not found; selecting the first project.", active_id)
            active_id = projects[0].id

        with self._lock:
            self._projects = projects
            self._active_project_id = active_id
            self._persist()
        logger.info("Project store ready with %d project(s).", len(projects))

    @staticmethod
    def _drop_duplicate_ids(projects: List[WebsiteProject]) -> List[WebsiteProject]:
        seen = set()
        unique: List[WebsiteProject] = []
        for project in projects:
            if project.id in seen:
                logger.warning("Dropping saved project with duplicate id %s.", project.id)
                continue
            seen.add(project.id)
            unique.append(project)
        return unique

    # ------------------- Read access -------------------
    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def active_project_id(self) -> Optional[str]:
        return self._active_project_id

    def list_projects(self) -> List[WebsiteProject]:
        """Return copies of all projects in display order."""
        with self._lock:
            return [project.model_copy(deep=True) for project in self._projects]

    def get_active_project(self) -> Optional[WebsiteProject]:
        with self._lock:
            project = self._find_project(self._active_project_id)
            return project.model_copy(deep=True) if project else None

    # ------------------- Project lifecycle -------------------
    def create_project(self) -> WebsiteProject:
        """Append an empty project named after its position and make it active."""
        with self._lock:
            project = new_project(f"Website {len(self._projects) + 1}")
            self._projects.append(project)
            self._active_project_id = project.id
            self._last_error = None
            self._persist()
            created = project.model_copy(deep=True)
        logger.info("Created project %s (%s).", created.id, created.name)
        self._publish_projects_changed()
        return created

    def select_project(self, project_id: str) -> bool:
        """Activate an existing project. Unknown ids are ignored."""
        with self._lock:
            if self._find_project(project_id) is None:
                logger.debug("Ignoring selection of unknown project %s.", project_id)
                return False
            self._active_project_id = project_id
            self._last_error = None
            self._persist()
        self._publish_projects_changed()
        return True

    def delete_project(self, project_id: str) -> bool:
        """
        Remove a project, keeping the collection non-empty and the selection valid.

        Returns:
            True if a project was removed.
        """
        with self._lock:
            remaining = [project for project in self._projects if project.id != project_id]
            if len(remaining) == len(self._projects):
                logger.debug("Ignoring deletion of unknown project %s.", project_id)
                return False

            if not remaining:
                replacement = new_project()
                remaining = [replacement]
                self._active_project_id = replacement.id
                logger.info("Deleted the last project; created default project %s.", replacement.id)
            elif self._active_project_id == project_id:
                self._active_project_id = remaining[0].id

            self._projects = remaining
            self._persist()
        logger.info("Deleted project %s.", project_id)
        self._publish_projects_changed()
        return True

    def clear_error(self) -> None:
        self._last_error = None

    # ------------------- Generation -------------------
    def send_message(self, prompt: str) -> bool:
        """
        Send a prompt for the active project and store the generated website.

        Blank prompts, calls made while another generation is pending and
        calls without an active project are ignored. On failure the project
        is restored to its state before the call and ``last_error`` is set.
        ``is_loading`` is cleared on every path, including errors raised by
        event subscribers.

        Returns:
            True if a new document was generated and stored.
        """
        with self._lock:
            if not prompt or not prompt.strip():
                return False
            if self._is_loading:
                logger.info("Ignoring message while a generation is in flight.")
                return False
            target = self._find_project(self._active_project_id)
            if target is None:
                logger.warning("Ignoring message: no active project.")
                return False

            rollback_point = [project.model_copy(deep=True) for project in self._projects]
            target_id = target.id
            self._is_loading = True
            self._last_error = None

        try:
            return self._run_generation(target_id, prompt, rollback_point)
        finally:
            with self._lock:
                self._is_loading = False

    def _run_generation(self, target_id: str, prompt: str, rollback_point: List[WebsiteProject]) -> bool:
        try:
            with self._lock:
                target = self._find_project(target_id)
                if target is None:
                    logger.warning("Project %s was deleted before the prompt was recorded.", target_id)
                    return False
                is_first_message = not target.chat_history
                target.chat_history.append(Message(role="user", content=prompt))
                if is_first_message:
                    target.name = derive_project_name(prompt)
                history = [message.model_copy() for message in target.chat_history]
                self._persist()

            self._publish_projects_changed()
            self._dispatch(GENERATION_STARTED, project_id=target_id, prompt=prompt)

            raw_code = self.completion_client.generate(history)
            code = self.sanitizer.sanitize_html(raw_code)
        except Exception as exc:
            error_message = str(exc) or UNKNOWN_ERROR_MESSAGE
            logger.error("Website generation for project %s failed: %s", target_id, exc, exc_info=True)
            with self._lock:
                self._restore_project(target_id, rollback_point)
                self._last_error = error_message
                self._is_loading = False
                self._persist()
            self._publish_projects_changed()
            self._dispatch(
                GENERATION_FAILED,
                project_id=target_id,
                prompt=prompt,
                error=error_message,
                error_type=type(exc).__name__,
            )
            return False

        with self._lock:
            project = self._find_project(target_id)
            if project is not None:
                project.chat_history.append(Message(role="assistant", content=code))
                project.generated_code = code
                self._persist()
            else:
                logger.warning("Project %s was deleted during generation; discarding result.", target_id)
            self._is_loading = False

        if project is None:
            self._publish_projects_changed()
            return False

        logger.info("Stored generated website for project %s (%d chars).", target_id, len(code))
        self._publish_projects_changed()
        self._dispatch(GENERATION_COMPLETED, project_id=target_id, code_length=len(code))
        return True

    def _restore_project(self, project_id: str, rollback_point: List[WebsiteProject]) -> None:
        """Put the pre-call copy of one project back in place, if it still exists."""
        original = next((project for project in rollback_point if project.id == project_id), None)
        for index, project in enumerate(self._projects):
            if project.id == project_id and original is not None:
                self._projects[index] = original
                return
        logger.debug("Project %s no longer exists; nothing to roll back.", project_id)

    # ------------------- Helpers -------------------
    def _find_project(self, project_id: Optional[str]) -> Optional[WebsiteProject]:
        if project_id is None:
            return None
        return next((project for project in self._projects if project.id == project_id), None)

    def _persist(self) -> None:
        snapshot = StoreSnapshot(
            projects=list(self._projects),
            active_project_id=self._active_project_id,
        )
        try:
            self.storage.save(snapshot)
        except Exception as exc:
            logger.error("Failed to persist projects; keeping in-memory state: %s", exc, exc_info=True)

    def _publish_projects_changed(self) -> None:
        with self._lock:
            payload = {
                "active_project_id": self._active_project_id,
                "project_count": len(self._projects),
            }
        self._dispatch(PROJECTS_CHANGED, **payload)

    def _dispatch(self, event_type: str, **payload: Any) -> None:
        if self.event_bus is None:
            return
        self.event_bus.dispatch(Event(event_type=event_type, payload=payload))
