"""
Pydantic model for application configuration.
Provides validation for the store and backend settings.
"""

from pydantic import BaseModel, Field, field_validator

# Backend name -> human-readable description
BACKEND_MAP = {
    "memory": "In-memory (not persisted)",
    "file": "JSON files",
    "sqlite": "SQLite database",
}

DEFAULT_STORAGE_KEY = "cart"


class StoreConfig(BaseModel):
    """A validated configuration model for the cart store."""

    # Storage
    backend: str = "file"
    data_dir: str
    storage_key: str = DEFAULT_STORAGE_KEY

    # Behaviour
    validate_qty: bool = False
    event_log: bool = False

    # Internal fields not loaded from INI file
    config_path: str = Field(..., repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Ensures the backend is one of the supported implementations."""
        v = v.lower()
        if v not in BACKEND_MAP:
            raise ValueError(
                f"Backend must be one of {', '.join(sorted(BACKEND_MAP))}, got '{v}'."
            )
        return v

    @field_validator("data_dir")
    @classmethod
    def validate_data_dir(cls, v: str) -> str:
        if not v:
            raise ValueError("Data directory cannot be empty.")
        return v

    @field_validator("storage_key")
    @classmethod
    def validate_storage_key(cls, v: str) -> str:
        """The storage key names a single backend slot."""
        if not v:
            raise ValueError("Storage key cannot be empty.")
        if any(ch.isspace() for ch in v):
            raise ValueError(f"Storage key cannot contain whitespace: '{v}'")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
