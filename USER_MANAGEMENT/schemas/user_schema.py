from pydantic import BaseModel, field_validator
from typing import Optional
from starlette.datastructures import FormData, UploadFile

USER_FIELDS = ["name", "email", "mobile", "address"]


class UserForm(BaseModel):
    name: str = ""
    email: str = ""
    mobile: str = ""
    address: str = ""

    @field_validator("name", "email", "mobile", "address", mode="before")
    @classmethod
    def strip_value(cls, v) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @classmethod
    def from_form(cls, form: FormData) -> "UserForm":
        return cls(**{
            field: form.get(field)
            for field in USER_FIELDS
            if not isinstance(form.get(field), UploadFile)
        })


class ImageUpload(BaseModel):
    filename: str
    content_type: Optional[str] = None
    content: bytes

    @property
    def size_kb(self) -> float:
        return len(self.content) / 1024

    @classmethod
    async def from_form(cls, form: FormData, field: str = "profile_image") -> Optional["ImageUpload"]:
        upload = form.get(field)
        # browsers submit an empty part when no file was chosen
        if not isinstance(upload, UploadFile) or not upload.filename:
            return None
        content = await upload.read()
        return cls(filename=upload.filename, content_type=upload.content_type, content=content)
