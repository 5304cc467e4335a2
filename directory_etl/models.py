"""
Typed data models for the business directory pipeline and the webhook forwarder.
All data structures used throughout the codebase should be defined here.
"""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Mapping, Optional, Union

BUSINESS_COLUMNS = [
    "id", "name", "description", "address", "phone", "email", "website", "rating",
    "is_verified", "is_member", "images", "location", "operating_hours", "is_open",
    "status", "owner_id", "created_at", "updated_at",
]
CATEGORY_COLUMNS = ["id", "name", "description", "created_at", "updated_at"]
LINK_COLUMNS = ["business_id", "category_id", "created_at", "updated_at"]

# Source column name for each SourceRecord field
SOURCE_COLUMNS = {
    "company_name": "CompanyName",
    "status": "CompanyStatus",
    "classification": "CompanyIndustrialClassification",
    "address": "Registered_Office_Address",
    "phone": "Phone",
    "email": "Email",
    "website": "Website",
    "registration_date": "CompanyRegistrationdate_date",
    "simplified_category": "simplified_category",
}


@dataclass
class SourceRecord:
    """One row of the company registry export."""
    company_name: str = ""
    status: str = ""
    classification: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    registration_date: str = ""
    simplified_category: str = ""  # Only present after the annotate stage

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SourceRecord":
        values = {}
        for attr, column in SOURCE_COLUMNS.items():
            value = row.get(column)
            values[attr] = "" if value is None else str(value)
        return cls(**values)


@dataclass
class Business:
    """Output business row."""
    id: str
    name: str
    description: str
    address: str
    phone: str = ""
    email: str = ""
    website: str = ""
    rating: float = 0.0
    is_verified: bool = False
    is_member: bool = False
    images: List[str] = field(default_factory=list)
    location: Optional[str] = None
    operating_hours: Optional[str] = None
    is_open: bool = False
    status: str = "approved"
    owner_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        data = asdict(self)
        return {col: data[col] for col in BUSINESS_COLUMNS}


@dataclass
class Category:
    """Output category row. Description mirrors the name."""
    id: str
    name: str
    description: str
    created_at: str
    updated_at: str

    def to_row(self) -> Dict[str, Any]:
        data = asdict(self)
        return {col: data[col] for col in CATEGORY_COLUMNS}


@dataclass
class BusinessCategoryLink:
    """Output link between one business and one category."""
    business_id: str
    category_id: str
    created_at: str
    updated_at: str

    def to_row(self) -> Dict[str, Any]:
        data = asdict(self)
        return {col: data[col] for col in LINK_COLUMNS}


@dataclass
class RejectionEntry:
    """A source record that was excluded from the output tables."""
    name: str
    address: str
    reason: str

    @property
    def message(self) -> str:
        return f'Business "{self.name}" with address "{self.address}" {self.reason}'


@dataclass(frozen=True)
class Mapped:
    """Classification found a table entry."""
    label: str


@dataclass(frozen=True)
class Fallback:
    """Classification found no table entry for the slug."""
    slug: str = ""


CategoryOutcome = Union[Mapped, Fallback]


@dataclass
class PipelineOutput:
    """Everything a run materializes, buffered in memory until commit."""
    businesses: List[Business] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    links: List[BusinessCategoryLink] = field(default_factory=list)
    rejections: List[RejectionEntry] = field(default_factory=list)
    category_descriptions: Dict[str, str] = field(default_factory=dict)  # Informational only


@dataclass
class GhostPost:
    """The `post.current` object of a Ghost webhook."""
    id: str
    title: str
    html: str
    slug: str
    published_at: str
    feature_image: Optional[str] = None
    excerpt: Optional[str] = None
    primary_author: Optional[str] = None  # Author display name


@dataclass
class Article:
    """Row sent to the Supabase `articles` table."""
    id: str
    ghost_id: str
    title: str
    description: str
    author: str
    published_at: str
    image_url: str
    html_content: str
    slug: str

    def to_json(self) -> Dict[str, Any]:
        return asdict(self)
