"""The signed-in account, as far as ordering rules are concerned."""

from protean.fields import Boolean, String

from ordering.cart.limits import ValidationMode
from ordering.domain import ordering


@ordering.value_object
class Account:
    user_id = String(required=True, max_length=255)
    privileged = Boolean(default=False)
    active = Boolean(default=True)

    @property
    def validation_mode(self) -> ValidationMode:
        return ValidationMode.UNRESTRICTED if self.privileged else ValidationMode.STANDARD
