"""YAML files for documents and templates.

Files use the camelCase field names of the document store. This is only the
CLI's way of getting values in and out; the engine itself never touches disk
except to write exports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, TypeVar

import pydantic
import yaml
from pydantic import BaseModel

from gstinvoice.documents.models import BillerInfo, InvoiceDocument
from gstinvoice.errors import ValidationError
from gstinvoice.template.models import InvoiceTemplate

M = TypeVar("M", bound=BaseModel)


def _read(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValidationError(f"{path} does not contain a mapping")
    return data


def _validate(model_cls: type[M], data: dict[str, Any], path: Path) -> M:
    try:
        return model_cls.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid {model_cls.__name__} in {path}: {exc}") from exc


def load_template(path: Path) -> InvoiceTemplate:
    return _validate(InvoiceTemplate, _read(path), path)


def load_document(path: Path, default_biller: Optional[BillerInfo] = None) -> InvoiceDocument:
    """Load a document; `default_biller` fills a missing billerInfo."""
    data = _read(path)
    if default_biller is not None and not (data.get("billerInfo") or data.get("biller_info")):
        data["billerInfo"] = default_biller.model_dump(by_alias=True)
    return _validate(InvoiceDocument, data, path)


def dump_model(model: BaseModel, path: Path) -> Path:
    """Write a model with camelCase keys."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(
            model.model_dump(mode="json", by_alias=True),
            f,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
    return path
