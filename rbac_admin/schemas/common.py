from pydantic import BaseModel


class ApiResponse(BaseModel):
    success: bool
    message: str

    @classmethod
    def ok(cls, message: str) -> "ApiResponse":
        return cls(success=True, message=message)

    @classmethod
    def error(cls, message: str) -> "ApiResponse":
        return cls(success=False, message=message)
