#Expose the high-level pipeline pieces:
#Candidate building (rank inputs per partner)
#Scoring / ranking
#Assignment transaction, reassignment gate, pending sweep
#Dispatcher orchestrator (the “one call” entry point)

from .candidate_filter import build_base_candidates
from .scoring import Candidate, rank_candidates, locality_rank_group
from .assignment import AssignmentResult, AssignmentStatus, assign_delivery_partner
from .reassignment import reassign_if_eligible
from .sweeper import SweepResult, sweep_pending
from .store import AssignmentStore, InMemoryAssignmentStore
from .dispatcher import Dispatcher, AssignmentRequestError, MissingOrderIdError, UnsupportedActionError #the main entry point for request handlers

__all__ = [
    "build_base_candidates",
    "Candidate",
    "rank_candidates",
    "locality_rank_group",
    "AssignmentResult",
    "AssignmentStatus",
    "assign_delivery_partner",
    "reassign_if_eligible",
    "SweepResult",
    "sweep_pending",
    "AssignmentStore",
    "InMemoryAssignmentStore",
    "Dispatcher",
    "AssignmentRequestError",
    "MissingOrderIdError",
    "UnsupportedActionError",
]
