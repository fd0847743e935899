"""
Event Type Constants

Centralized definitions for all event types used in Sitesmith's event bus.
"""

# Project store events
PROJECTS_CHANGED = "PROJECTS_CHANGED"
"""
Dispatched after any change to the project collection or the active project.

Payload:
    active_project_id (str | None): Identifier of the project now displayed
    project_count (int): Number of projects in the collection
"""

GENERATION_STARTED = "GENERATION_STARTED"
"""
Dispatched once the user's prompt has been recorded and the completion request is about to go out.

Payload:
    project_id (str): Project the generation belongs to
    prompt (str): The prompt that was sent
"""

GENERATION_COMPLETED = "GENERATION_COMPLETED"
"""
Dispatched after the generated document has been stored on its project.

Payload:
    project_id (str): Project the generation belongs to
    code_length (int): Length of the sanitized document
"""

GENERATION_FAILED = "GENERATION_FAILED"
"""
Dispatched after a failed generation has been rolled back.

Payload:
    project_id (str): Project the generation belonged to
    prompt (str): The prompt that was rolled back
    error (str): Human-readable failure description
    error_type (str): Exception class name, e.g. 'AuthError'
"""
