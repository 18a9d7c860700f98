"""Configuration schema for gettext-extractor using Pydantic models."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..extraction.plurals import normalize_header_key
from ..extraction.signatures import DEFAULT_FUNCTION_NAMES, ROLES

DEFAULT_FILE_NAME = "gettext.po"


def _default_function_names() -> dict[str, list[str | None]]:
    return {name: list(roles) for name, roles in DEFAULT_FUNCTION_NAMES.items()}


class ExtractorConfig(BaseModel):
    """
    Extraction configuration.

    Field names follow Python conventions; the camelCase spellings
    ``functionNames``, ``fileName`` and ``baseDirectory`` are accepted too.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        populate_by_name=True,
        extra="forbid",
    )

    function_names: dict[str, list[str | None]] = Field(
        default_factory=_default_function_names,
        alias="functionNames",
        description="Translation function names mapped to their argument roles",
    )
    file_name: str = Field(
        default=DEFAULT_FILE_NAME,
        alias="fileName",
        description="Output catalog file; a new catalog starts whenever it changes",
        min_length=1,
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Catalog header overrides (Content-Type, Plural-Forms, ...)",
    )
    base_directory: str | None = Field(
        default=None,
        alias="baseDirectory",
        description="Prefix stripped from reference paths; '.' means the working directory",
    )
    exclude_dirs: list[str] = Field(
        default_factory=list,
        description="Extra directory names skipped while scanning sources",
    )
    write_through: bool = Field(
        default=False,
        description="Rewrite the output file after every extracted call-site",
    )

    @field_validator("function_names")
    @classmethod
    def validate_function_names(
        cls, v: dict[str, list[str | None]]
    ) -> dict[str, list[str | None]]:
        """Validate that every role is a known argument role."""
        for name, roles in v.items():
            if not name:
                raise ValueError("Function names must not be empty")
            unknown = [role for role in roles if role is not None and role not in ROLES]
            if unknown:
                raise ValueError(
                    f"Unknown argument role(s) {unknown} for function '{name}'; "
                    f"expected one of {sorted(ROLES)}"
                )
        return v

    @field_validator("headers")
    @classmethod
    def validate_headers(cls, v: dict[str, str]) -> dict[str, str]:
        """Normalize header keys to their canonical spelling."""
        return {normalize_header_key(key): value for key, value in v.items()}

    @field_validator("base_directory")
    @classmethod
    def validate_base_directory(cls, v: str | None) -> str | None:
        """Treat an empty base directory as unset."""
        if v is not None and not v.strip():
            return None
        return v
