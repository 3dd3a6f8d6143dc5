"""Profile bundle intake. Fields are accepted without validation or change."""

import structlog

from api.src.models.demo import ProfileAck, ProfileBundle

logger = structlog.get_logger(__name__)

PROFILE_UPDATED = "Profile updated"
DEFAULT_ROLE = "user"


class ProfileProcessor:
    """Forwards a profile bundle unchanged."""

    def process(self, profile: ProfileBundle, role: str = DEFAULT_ROLE) -> ProfileAck:
        logger.info("profile_processed", role=role)
        return ProfileAck(
            role=role,
            fields_received=len(ProfileBundle.model_fields),
            profile=profile,
        )
