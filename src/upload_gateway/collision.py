import logging
from pathlib import Path

from upload_gateway.models.enums import CollisionDecision

logger = logging.getLogger(__name__)


def check_and_maybe_reject(path: Path, name: str, allow_replace: bool) -> CollisionDecision:
    """Reject when ``path / name`` already exists and replacing is disabled.

    Check-then-act: two concurrent uploads of the same name are not locked
    against each other.
    """
    if allow_replace:
        return CollisionDecision.proceed

    if (Path(path) / name).exists():
        logger.info("Refusing to overwrite existing file %s in %s", name, path)
        return CollisionDecision.reject_existing
    return CollisionDecision.proceed
