"""Engine configuration, stored as YAML.

The file is looked up at --config, then $GSTINVOICE_CONFIG (a .env file in
the working directory is honoured), then ./gstinvoice.yaml. A default file is
written the first time none exists.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal, Optional

import pydantic
import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from gstinvoice.documents.models import BillerInfo
from gstinvoice.errors import ValidationError
from gstinvoice.export.pipeline import ExportOptions, page_size

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("gstinvoice.yaml")
CONFIG_ENV_VAR = "GSTINVOICE_CONFIG"


class EngineConfig(BaseModel):
    """Rendering and export settings."""

    currency_symbol: str = "₹"
    pdf_currency_symbol: str = "Rs."
    page_size: Literal["A4", "letter"] = "A4"
    orientation: Literal["portrait", "landscape"] = "portrait"
    scale: float = Field(default=2.0, gt=0, le=4)
    dpi: int = Field(default=150, ge=72, le=600)
    content_width: int = Field(default=794, ge=200)
    export_timeout: float = Field(default=30.0, gt=0)
    font_path: Optional[Path] = None
    biller: Optional[BillerInfo] = None

    def export_options(self) -> ExportOptions:
        return ExportOptions(
            page=page_size(self.page_size, self.orientation),
            scale=self.scale,
            dpi=self.dpi,
            content_width=self.content_width,
            timeout=self.export_timeout,
            currency_symbol=self.pdf_currency_symbol,
            font_path=self.font_path,
        )


def config_path(path: Optional[Path] = None) -> Path:
    """Resolve the configuration file path."""
    if path is not None:
        return path
    load_dotenv()
    env = os.environ.get(CONFIG_ENV_VAR)
    return Path(env) if env else DEFAULT_CONFIG_PATH


def write_config(config: EngineConfig, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(
            config.model_dump(mode="json", exclude_none=True),
            f,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
    return path


def load_config(path: Optional[Path] = None) -> EngineConfig:
    """Load the configuration, creating a default file if there is none.

    Raises:
        ValidationError: The file exists but holds invalid settings.
    """
    resolved = config_path(path)
    if not resolved.exists():
        default = EngineConfig()
        write_config(default, resolved)
        logger.info("Default configuration written to %s", resolved)
        return default

    with open(resolved, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    try:
        return EngineConfig.model_validate(data or {})
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid configuration {resolved}: {exc}") from exc
