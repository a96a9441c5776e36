from enum import Enum
from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field


class Flavor(str, Enum):
    TEXT = "text"  # OCR text in, single-item receipt out
    IMAGE = "image"  # receipt image in, multi-item receipt out


class TextInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str


class ImageInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str


RawInput = TextInput | ImageInput


class FilePart(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str


class Attachment(BaseModel):
    mime_type: str
    data_base64: str


class GenerationConfig(BaseModel):
    temperature: float
    top_p: float
    top_k: int
    max_output_tokens: int
    response_format: Literal["json", "text"] = "json"


class ModelRequest(BaseModel):
    instruction_text: str
    attachment: Attachment | None = None
    generation_config: GenerationConfig


Number = int | float


class SingleItemReceipt(BaseModel):
    name: str = ""
    store: str = ""
    total: Number | Literal[""] = ""  # "" is the empty sentinel
    date: str = ""  # YYYY-MM-DD
    quantity: Number | Literal[""] = ""
    unit: str = ""
    memo: str = ""


class ReceiptLineItem(BaseModel):
    name: str  # never blank
    price: Number  # never negative


class MultiItemReceipt(BaseModel):
    store: str = ""
    items: list[ReceiptLineItem] = Field(default_factory=list)


CanonicalReceipt = SingleItemReceipt | MultiItemReceipt


class SanitizedReceipt(BaseModel):
    receipt: CanonicalReceipt
    status: Literal["parsed", "defaulted"]  # defaulted: no usable JSON in the model output

    @property
    def defaulted(self) -> bool:
        return self.status == "defaulted"


class UpstreamResponse(BaseModel):
    status_code: int
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class ModelTransport(Protocol):
    async def submit(self, body: bytes) -> UpstreamResponse: ...
