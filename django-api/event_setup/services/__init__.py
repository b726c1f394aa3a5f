from event_setup.services.draft_persistence import DraftPersistence, LocalDraft, has_unsaved_changes
from event_setup.services.event_service import EventService
from event_setup.services.staffing import ShareLink, StaffingAssigner, is_supervisory_role, remaining_slots
from event_setup.services.step_validator import validate_step, validate_through
from event_setup.services.wizard import EventSetupWizard, Notice, WizardState

__all__ = [
    "DraftPersistence",
    "LocalDraft",
    "has_unsaved_changes",
    "EventService",
    "ShareLink",
    "StaffingAssigner",
    "is_supervisory_role",
    "remaining_slots",
    "validate_step",
    "validate_through",
    "EventSetupWizard",
    "Notice",
    "WizardState",
]
