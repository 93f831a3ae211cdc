# printify_check/config/schema.py
"""
Pydantic configuration models for printify-check.

All models use extra="ignore" to allow unknown YAML keys without crashing.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ApiConfig(BaseModel):
    """Processing API connection settings."""

    model_config = ConfigDict(extra="ignore")

    base_url: str = Field(
        default="http://localhost:8080/api", description="Processing API base URL"
    )
    timeout: float = Field(
        default=60.0, gt=0.0, description="Timeout in seconds for status/result requests"
    )
    upload_timeout: float = Field(
        default=300.0, gt=0.0, description="Timeout in seconds for requests carrying a file"
    )
    user_id: str | None = Field(
        default=None, description="User id sent with submissions (None = omit)"
    )


class PollingConfig(BaseModel):
    """Job polling settings."""

    model_config = ConfigDict(extra="ignore")

    interval: float = Field(
        default=2.0, gt=0.0, description="Seconds between status polls (fixed, no backoff)"
    )
    timeout: float | None = Field(
        default=600.0,
        gt=0.0,
        description="Give up after this many seconds (None = poll until terminal)",
    )


class WizardConfig(BaseModel):
    """Wizard defaults."""

    model_config = ConfigDict(extra="ignore")

    pro_or_team: bool = Field(
        default=False, description="Entitlement to the Pro-only OCR and redaction steps"
    )
    default_standards: list[str] = Field(
        default_factory=lambda: ["PDFA_1B", "PDFUA_1", "WCAG_2_1_AA"],
        description="Standards checked by multi-level compliance validation",
    )


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    model_config = ConfigDict(extra="ignore")

    download_dir: str = Field(
        default=".", description="Directory where processed files are saved"
    )
    verbosity: Literal["quiet", "normal", "verbose"] = Field(
        default="normal", description="Logging verbosity level"
    )


class PrintifyCheckConfig(BaseModel):
    """Root configuration for printify-check."""

    model_config = ConfigDict(extra="ignore")

    api: ApiConfig = Field(default_factory=ApiConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    wizard: WizardConfig = Field(default_factory=WizardConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
