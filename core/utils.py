"""
Request helpers shared by the feature routers
"""
from dataclasses import dataclass, field
from typing import Annotated, Any, TypeAlias

from fastapi import Depends, Request
from starlette.datastructures import UploadFile

from core.errors import RecordValidationError


@dataclass
class Payload:
  """Fields of a create/update request and any files sent with it."""
  fields: dict[str, Any] = field(default_factory=dict)
  files: dict[str, UploadFile] = field(default_factory=dict)

  def file(self, name: str) -> UploadFile | None:
    upload = self.files.get(name)
    # Browsers send an empty part for an untouched file input
    if upload is None or not upload.filename:
      return None
    return upload


async def read_payload(request: Request) -> Payload:
  """
  Read a JSON body or a form-encoded/multipart body.
  The admin panel posts forms, the client application posts JSON.
  """
  content_type = request.headers.get("content-type", "")
  if content_type.startswith("application/json"):
    try:
      body = await request.json()
    except ValueError as exc:
      raise RecordValidationError.for_field("body", "Malformed JSON body.") from exc
    if not isinstance(body, dict):
      raise RecordValidationError.for_field("body", "Expected a JSON object.")
    return Payload(fields=body)

  form = await request.form()
  payload = Payload()
  for key, value in form.multi_items():
    if isinstance(value, UploadFile):
      payload.files[key] = value
    else:
      payload.fields[key] = value
  return payload


PayloadDep: TypeAlias = Annotated[Payload, Depends(read_payload)]
