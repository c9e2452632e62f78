"""Registry error taxonomy.

Every failure raised by the membership, invitation, linking and registration
services is a ``RegistryError``. The API renders them as
``{"code": <kind>, "message": <text>}`` with the class's status code.
"""


class RegistryError(Exception):
    """Base exception for registry domain errors."""

    code: str = "RegistryError"
    status_code: int = 422
    default_message: str = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class AuthTokenInvalid(RegistryError):
    code = "AuthTokenInvalid"
    status_code = 401
    default_message = "Authentication token is missing or invalid"


class AuthorizedUserStartupMismatch(RegistryError):
    code = "AuthorizedUserStartupMismatch"
    default_message = "Authorized user does not belong to the requested startup"


class UserAlreadyHasStartup(RegistryError):
    code = "UserAlreadyHasStartup"
    default_message = "User already has a startup"


class UserAlreadyMemberOfStartup(RegistryError):
    code = "UserAlreadyMemberOfStartup"
    default_message = "User is already a member of a startup"


class UserHasPendingStartupInvite(RegistryError):
    code = "UserHasPendingStartupInvite"
    default_message = "User already has a pending startup invitation"


class FounderMissing(RegistryError):
    code = "FounderMissing"
    status_code = 404
    default_message = "Could not find a founder with the supplied email"


class UserIsNotPendingFounder(RegistryError):
    code = "UserIsNotPendingFounder"
    default_message = "User does not have a pending startup invitation"


class UserPendingStartupMismatch(RegistryError):
    code = "UserPendingStartupMismatch"
    default_message = "User's pending invitation is for a different startup"


class StartupInvalidApprovalState(RegistryError):
    code = "StartupInvalidApprovalState"
    default_message = "Startup approval status does not allow this transition"


class StartupAlreadyRegistered(RegistryError):
    code = "StartupAlreadyRegistered"
    default_message = "Startup has already been registered"


class StartupNotFound(RegistryError):
    code = "StartupNotFound"
    status_code = 404
    default_message = "Startup not found"


class InvalidPartnerEntry(RegistryError):
    code = "InvalidPartnerEntry"
    default_message = "Partner entry is invalid"
