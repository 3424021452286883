"""
Data Schemas for the portfolio content

ContentDocument is the single unit of truth: it is stored as six local keys
and as one opaque row in the remote `portfolio` table. Wire names are
camelCase (what the front-end reads), Python attributes are snake_case.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# Content
class Project(WireModel):
    id: int
    title: str
    category: str = "Web Development"  # free text, UI offers a fixed list
    image: str = ""  # url or data: uri
    demo_url: str = Field(default="#", alias="demoUrl")
    youtube_url: str = Field(default="#", alias="youtubeUrl")
    description: str = ""


class Graphic(WireModel):
    id: int
    title: str
    category: Literal["Branding", "UI/UX", "Social Media"] = "Branding"
    image: str = ""


class Review(WireModel):
    id: int
    name: str
    role: str = "Client"
    comment: str = ""
    rating: int = Field(default=5, ge=1, le=5)
    avatar: str = ""


class ShowcaseItem(WireModel):
    """Linked work sample: name / image / link (+ tech stack)."""

    kind: Literal["showcase"] = "showcase"
    name: str
    image: str = ""
    link: str = "#"
    tech: Optional[str] = None


class MediaItem(WireModel):
    """Media sample: title / url / thumbnail. Some galleries carry `image` instead of a thumbnail."""

    kind: Literal["media"] = "media"
    title: str
    url: Optional[str] = None
    thumbnail: Optional[str] = None
    image: Optional[str] = None


ServiceItem = Annotated[Union[ShowcaseItem, MediaItem], Field(discriminator="kind")]


class PerformanceMetric(WireModel):
    label: str
    before: str
    after: str
    trend: str = "up"


class BrandingCase(WireModel):
    before: str
    after: str
    performance: List[PerformanceMetric] = []


def tag_service_item(item: Any) -> Any:
    """Give an untagged stored item its explicit variant."""
    if isinstance(item, dict) and "kind" not in item:
        return {**item, "kind": "showcase" if "name" in item else "media"}
    return item


class AboutData(WireModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    title: str = ""
    description: str = ""
    image: str = ""
    experience: str = ""
    cv: str = ""  # data: uri or url


class ContentDocument(WireModel):
    projects: List[Project] = []
    graphics: List[Graphic] = []
    reviews: List[Review] = []
    service_details: Dict[str, Union[List[ServiceItem], BrandingCase]] = Field(
        default_factory=dict, alias="serviceDetails"
    )
    contact_info: Dict[str, str] = Field(default_factory=dict, alias="contactInfo")
    about_data: AboutData = Field(default_factory=AboutData, alias="aboutData")

    @field_validator("service_details", mode="before")
    @classmethod
    def _tag_items(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {
            name: [tag_service_item(item) for item in entry] if isinstance(entry, list) else entry
            for name, entry in value.items()
        }

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


# Messages (remote-only, append-only)
class MessageCreate(BaseModel):
    name: str
    email: str
    subject: str
    message: str


class Message(MessageCreate):
    id: Optional[int] = None
    created_at: Optional[datetime] = None


# Request / response bodies
class ReviewSubmission(BaseModel):
    name: str = ""
    comment: str = ""
    rating: int = Field(default=0, ge=0, le=5)


class FieldUpdate(BaseModel):
    path: str
    value: Any = None


class ServiceItemUpdate(BaseModel):
    role: Literal["label", "link", "picture", "tech"]
    value: str


class LoginRequest(BaseModel):
    username: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class CommitReport(BaseModel):
    outcome: Literal["synced", "local_only"]
    message: str
