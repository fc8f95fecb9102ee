"""Account directory behaviour configuration."""

from pydantic import BaseModel, Field


class AccountsConfig(BaseModel):
    """Directory operation settings."""

    strict_updates: bool = Field(
        default=False,
        description=(
            "Reject update-by-id payload keys other than accountName, "
            "accountEmail, phone and externalId instead of merging them"
        ),
    )
