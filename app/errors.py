"""Domain exceptions raised by the service layer."""


class GenerationError(RuntimeError):
    """The language model round trip failed or returned unusable output."""


class PlanAccessDenied(LookupError):
    """The plan does not exist or is not owned by the requester.

    Both cases raise the same error with the same message.
    """

    def __init__(self, plan_id: str) -> None:
        super().__init__(f"Study plan {plan_id} not found")
        self.plan_id = plan_id


class EmailAlreadyRegistered(ValueError):
    """Signup attempted with an email that already has an account."""


class InvalidCredentials(ValueError):
    """Login email/password pair did not match a user."""
