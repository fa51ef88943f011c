"""Router configuration."""

import logging
from dataclasses import dataclass
from typing import Optional

URL_METHODS = ("update", "replace")


@dataclass
class RouterConfig:
    """Configuration for a :class:`~routetransition.router.Router`.

    Attributes:
        log_transitions: Emit ``Transition #<sequence>: ...`` diagnostics
            through the router's logger.

        log_level: Level those diagnostics are logged at.

        yield_between_steps: Yield to the event loop before resolving each
            handler info. Other tasks (including a superseding transition)
            get a chance to run between resolution steps.

        default_url_method: URL method new transitions start with.
            ``"update"``, ``"replace"`` or None to leave the location alone.

    Examples:
        # Quiet router that never yields between steps
        RouterConfig(log_transitions=False, yield_between_steps=False)
    """

    log_transitions: bool = True
    log_level: int = logging.DEBUG
    yield_between_steps: bool = True
    default_url_method: Optional[str] = "update"

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        if self.default_url_method and self.default_url_method not in URL_METHODS:
            raise ValueError(
                f"default_url_method must be one of {URL_METHODS} or None, "
                f"got {self.default_url_method!r}"
            )
