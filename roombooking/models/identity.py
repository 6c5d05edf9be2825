"""Identity of the caller inside the host messaging environment."""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class HostIdentity(BaseModel):
    """Profile supplied by the host client (LIFF ``getProfile``).

    Absent entirely when the mini-app runs in a plain browser.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    display_name: str = ""
    user_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)
