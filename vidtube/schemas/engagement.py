"""Engagement Schemas — toggle outcome."""

from vidtube.schemas.common import CamelModel


class ToggleResult(CamelModel):
    """active=True: relation exists after the call; False: it was removed."""
    active: bool
