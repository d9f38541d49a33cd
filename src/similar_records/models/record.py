"""Record data models with validation."""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Iterator, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field

R = TypeVar("R", bound="Record")


@dataclass(frozen=True)
class Record:
    """
    Base class for records compared by the ranking engine.

    Subclasses declare their text fields as dataclass fields and list them,
    in order, in ``FIELDS``. A field set to ``None`` is absent; an empty
    string is present but carries no text.
    """
    FIELDS: ClassVar[Tuple[str, ...]] = ()

    def __post_init__(self) -> None:
        """Validate field values after initialization."""
        for name in self.FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"Field '{name}' must be a string or None, got {type(value).__name__}")

    def get_text(self, field: str) -> Optional[str]:
        """Return the text of a field, or None when the field is absent."""
        if field not in self.FIELDS:
            return None
        return getattr(self, field)

    def present_fields(self) -> Iterator[Tuple[str, str]]:
        """Yield (field, text) pairs for every field that is not None."""
        for name in self.FIELDS:
            value = getattr(self, name)
            if value is not None:
                yield name, value

    def has_text(self) -> bool:
        """Check whether at least one field is non-empty."""
        return any(text for _, text in self.present_fields())

    def to_dict(self) -> Dict[str, str]:
        """Convert present fields to a dictionary."""
        return dict(self.present_fields())

    @classmethod
    def from_mapping(cls: Type[R], data: Mapping[str, Any]) -> R:
        """
        Build a record from a field mapping.

        Raises:
            ValueError: If the mapping contains keys that are not fields
        """
        unknown = set(data) - set(cls.FIELDS)
        if unknown:
            raise ValueError(f"Unknown fields for {cls.__name__}: {', '.join(sorted(unknown))}")
        return cls(**dict(data))


@dataclass(frozen=True)
class Post(Record):
    """
    Blog post compared by title and content.

    Attributes:
        title: Post title
        content: Post body
    """
    FIELDS: ClassVar[Tuple[str, ...]] = ("title", "content")

    title: str = ""
    content: str = ""


@dataclass(frozen=True)
class IssueFeatures(Record):
    """
    Features extracted from an issue report. Every field is optional.

    Attributes:
        operation: What the reporter did
        phenomenon: What was observed
        expected_behavior: What should have happened
        actual_behavior: What happened instead
    """
    FIELDS: ClassVar[Tuple[str, ...]] = (
        "operation",
        "phenomenon",
        "expected_behavior",
        "actual_behavior",
    )

    operation: Optional[str] = None
    phenomenon: Optional[str] = None
    expected_behavior: Optional[str] = None
    actual_behavior: Optional[str] = None


@dataclass(frozen=True)
class StoredRecord:
    """
    Record kept in a store under an identifier.

    Attributes:
        record_id: Unique record identifier
        record: The stored record
    """
    record_id: str
    record: Record

    def get_text(self, field: str) -> Optional[str]:
        """Return the text of a field of the wrapped record."""
        return self.record.get_text(field)


class PostModel(BaseModel):
    """Pydantic model for post validation in API contexts."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field("", description="Post title")
    content: str = Field("", description="Post body")

    def to_record(self) -> Post:
        """Convert to Post dataclass."""
        return Post(title=self.title, content=self.content)


class IssueFeaturesModel(BaseModel):
    """Pydantic model for issue features, accepting camelCase keys."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    operation: Optional[str] = Field(None, description="What the reporter did")
    phenomenon: Optional[str] = Field(None, description="What was observed")
    expected_behavior: Optional[str] = Field(
        None, alias="expectedBehavior", description="What should have happened"
    )
    actual_behavior: Optional[str] = Field(
        None, alias="actualBehavior", description="What happened instead"
    )

    def to_record(self) -> IssueFeatures:
        """Convert to IssueFeatures dataclass."""
        return IssueFeatures(
            operation=self.operation,
            phenomenon=self.phenomenon,
            expected_behavior=self.expected_behavior,
            actual_behavior=self.actual_behavior
        )


RECORD_MODELS: Dict[Type[Record], Type[BaseModel]] = {
    Post: PostModel,
    IssueFeatures: IssueFeaturesModel,
}
