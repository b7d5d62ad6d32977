"""
Request/response envelopes for the callable operations.

Record bodies (``client``, ``item``, ...) are accepted as plain mappings and
handed to the shared validation module, which owns sanitising and the
field-level error map. The envelopes use camelCase on the wire
(``itemId``, ``clientId``, ``fieldErrors``) and accept snake_case too.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RpcModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeleteRequest(RpcModel):
    id: Optional[str] = None


class UpsertClientRequest(RpcModel):
    id: Optional[str] = None
    client: Dict[str, Any] = {}


class UpsertItemRequest(RpcModel):
    id: Optional[str] = None
    item: Dict[str, Any] = {}


class UpsertSaleRequest(RpcModel):
    id: Optional[str] = None
    sale: Dict[str, Any] = {}


class UpsertBookingRequest(RpcModel):
    id: Optional[str] = None
    booking: Dict[str, Any] = {}
    force: bool = False  # bypass the overlap check


class UpsertResourceRequest(RpcModel):
    id: Optional[str] = None
    resource: Dict[str, Any] = {}


class AdjustQuantityRequest(RpcModel):
    item_id: str
    delta: Any = None  # anything that isn't a finite non-zero whole number is a no-op
    reason: Optional[str] = ""


class OkResult(RpcModel):
    ok: bool = True


class UpsertResult(OkResult):
    id: str


class ClientUpsertResult(UpsertResult):
    client_id: str


class ValidateResult(OkResult):
    field_errors: Dict[str, str] = {}


class AdjustQuantityResult(OkResult):
    applied: bool
    quantity: Optional[int] = None
