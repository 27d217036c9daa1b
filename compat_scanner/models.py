from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional, Union


class CheckResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    test_name: str = Field(alias="testName")
    passed: bool
    data: Any = None
    # Set when the outcome may differ on a re-scan of the same URL
    transient: Optional[bool] = None


class ScanReport(BaseModel):
    url: str
    process_time: float
    results: dict[str, CheckResult]


# --- Wire models ---

class UrlInfo(BaseModel):
    uri: str


class ScanResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: str
    url: UrlInfo
    process_time: float = Field(alias="processTime")
    results: dict[str, CheckResult]


class RemoteError(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status_code: Optional[Union[int, str]] = Field(alias="statusCode")
    message: str


class PackageRequest(BaseModel):
    html: Optional[str] = None
    css: Optional[Union[str, list]] = None
    js: Optional[Union[str, list]] = None
    url: Optional[str] = None

    def is_complete(self) -> bool:
        return all(value is not None for value in (self.html, self.css, self.js, self.url))
