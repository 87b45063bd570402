import enum


class PipelineState(str, enum.Enum):
    received = "received"
    validated = "validated"
    named = "named"
    collision_checked = "collision_checked"
    synced = "synced"
    responded = "responded"
    rejected_not_post = "rejected_not_post"
    rejected_validation = "rejected_validation"
    rejected_collision = "rejected_collision"
    failed_transport = "failed_transport"
    failed_unexpected = "failed_unexpected"


class CollisionDecision(str, enum.Enum):
    proceed = "proceed"
    reject_existing = "reject_existing"
