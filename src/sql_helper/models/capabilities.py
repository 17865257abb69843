"""Driver capabilities model."""

from pydantic import BaseModel, Field


class DatabaseCapabilities(BaseModel):
    """Flags indicating what features the connected driver supports."""

    transactions: bool = Field(
        default=True,
        description="Driver supports begin/commit/rollback",
    )
    foreign_keys: bool = Field(
        default=True,
        description="Database supports foreign key constraints",
    )
    positional_parameters: bool = Field(
        default=True,
        description="Driver binds '?' placeholders positionally",
    )
    query_size: bool = Field(
        default=False,
        description="Driver reports the size of a result set before it is fetched",
    )

    def get_supported_features(self) -> list[str]:
        """Get list of supported feature names."""
        return [
            field_name
            for field_name, value in self.model_dump().items()
            if value is True
        ]

    def get_unsupported_features(self) -> list[str]:
        """Get list of unsupported feature names."""
        return [
            field_name
            for field_name, value in self.model_dump().items()
            if value is False
        ]
