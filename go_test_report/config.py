"""Configuration for the package output parser."""

from pydantic import BaseModel, Field


class ParserConfig(BaseModel):
    """Configuration for parsing `go test` output."""

    test_duration_precision: int = Field(default=2, ge=0)
    package_duration_precision: int = Field(default=3, ge=0)
    # Used when the output never names the package (build failures, panics)
    default_package_name: str = ""
