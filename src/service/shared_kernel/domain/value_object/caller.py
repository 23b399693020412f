from enum import StrEnum

import attrs


class CallerRole(StrEnum):
    USER = 'user'
    VALIDATOR = 'validator'
    ADMIN = 'admin'


@attrs.define(frozen=True)
class Caller:
    """Authenticated identity supplied by the upstream auth layer"""

    identity: str
    role: str = CallerRole.USER
    name: str = ''

    @property
    def can_validate(self) -> bool:
        return self.role in (CallerRole.VALIDATOR, CallerRole.ADMIN)

    @property
    def is_admin(self) -> bool:
        return self.role == CallerRole.ADMIN

    @property
    def display_name(self) -> str:
        return self.name or self.identity
