"""Types shared by several resources."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated, Any, Generic, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler, PlainSerializer
from pydantic.alias_generators import to_camel
from pydantic_core import core_schema

T = TypeVar("T")


class StorageModel(BaseModel):
    """Base model of every resource record.

    Attribute names are snake_case, wire names camelCase. Unknown wire fields are ignored.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict[str, Any]:
        """Serialize the record with wire (camelCase) names, dropping unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Role(StrEnum):
    """Access permission of an entity."""

    OWNER = "OWNER"
    WRITER = "WRITER"
    READER = "READER"


class Team(StrEnum):
    """Project team of an entity."""

    OWNERS = "owners"
    EDITORS = "editors"
    VIEWERS = "viewers"


class EntityKind(StrEnum):
    """Kind of an entity holding a permission."""

    USER_ID = "user-id"
    USER_EMAIL = "user-email"
    GROUP_ID = "group-id"
    GROUP_EMAIL = "group-email"
    DOMAIN = "domain"
    PROJECT = "project"
    ALL_USERS = "allUsers"
    ALL_AUTHENTICATED_USERS = "allAuthenticatedUsers"


@dataclass(frozen=True, slots=True)
class Entity:
    """The entity holding a permission.

    On the wire an entity is a single string in one of the forms:

    * ``user-userId`` or ``user-email``
    * ``group-groupId`` or ``group-email``
    * ``domain-domain``
    * ``project-team-projectId``
    * ``allUsers``
    * ``allAuthenticatedUsers``

    Examples:
        >>> str(Entity.user_email("liz@example.com"))
        'user-liz@example.com'
        >>> Entity.parse("project-owners-123456").team
        <Team.OWNERS: 'owners'>

    """

    kind: EntityKind
    value: str | None = None
    team: Team | None = None

    @classmethod
    def user_id(cls, user_id: str) -> Self:
        """User identified by id."""
        return cls(EntityKind.USER_ID, user_id)

    @classmethod
    def user_email(cls, email: str) -> Self:
        """User identified by email."""
        return cls(EntityKind.USER_EMAIL, email)

    @classmethod
    def group_id(cls, group_id: str) -> Self:
        """Group identified by id."""
        return cls(EntityKind.GROUP_ID, group_id)

    @classmethod
    def group_email(cls, email: str) -> Self:
        """Group identified by email."""
        return cls(EntityKind.GROUP_EMAIL, email)

    @classmethod
    def domain(cls, domain: str) -> Self:
        """All members of a domain."""
        return cls(EntityKind.DOMAIN, domain)

    @classmethod
    def project(cls, team: Team, project_id: str) -> Self:
        """A team of a project."""
        return cls(EntityKind.PROJECT, project_id, team)

    @classmethod
    def all_users(cls) -> Self:
        """Anyone on the internet."""
        return cls(EntityKind.ALL_USERS)

    @classmethod
    def all_authenticated_users(cls) -> Self:
        """Anyone with a Google account."""
        return cls(EntityKind.ALL_AUTHENTICATED_USERS)

    @classmethod
    def parse(cls, raw: str) -> Self:
        """Parse the wire form of an entity.

        Raises:
            ValueError: If the string is not a known entity form.

        """
        if raw == "allUsers":
            return cls.all_users()
        if raw == "allAuthenticatedUsers":
            return cls.all_authenticated_users()

        prefix, sep, rest = raw.partition("-")
        if not sep or not rest:
            raise ValueError(f"Unknown entity: {raw!r}")

        match prefix:
            case "user":
                return cls.user_email(rest) if "@" in rest else cls.user_id(rest)
            case "group":
                return cls.group_email(rest) if "@" in rest else cls.group_id(rest)
            case "domain":
                return cls.domain(rest)
            case "project":
                team, sep, project_id = rest.partition("-")
                if not sep or not project_id or team not in Team:
                    raise ValueError(f"Unknown project entity: {raw!r}")
                return cls.project(Team(team), project_id)

        raise ValueError(f"Unknown entity: {raw!r}")

    def __str__(self) -> str:
        match self.kind:
            case EntityKind.ALL_USERS | EntityKind.ALL_AUTHENTICATED_USERS:
                return self.kind.value
            case EntityKind.USER_ID | EntityKind.USER_EMAIL:
                return f"user-{self.value}"
            case EntityKind.GROUP_ID | EntityKind.GROUP_EMAIL:
                return f"group-{self.value}"
            case EntityKind.DOMAIN:
                return f"domain-{self.value}"
            case EntityKind.PROJECT:
                return f"project-{self.team}-{self.value}"

    @classmethod
    def _validate(cls, value: Any) -> "Entity":
        if isinstance(value, Entity):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        raise ValueError(f"Entity must be a string, got {type(value).__name__}")

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


class ProjectTeam(StorageModel):
    """The project team associated with an entity."""

    project_number: str
    team: Team


class Owner(StorageModel):
    """The owner of a bucket or an object."""

    entity: Entity
    entity_id: str | None = None


class ListResponse(BaseModel, Generic[T]):
    """A page of a list endpoint.

    The service omits ``items`` entirely when the list is empty.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    kind: str | None = None
    items: list[T] = Field(default_factory=list)
    next_page_token: str | None = None


Int64 = Annotated[int, PlainSerializer(str, return_type=str, when_used="json")]
"""Integer sent as a decimal string on the wire, as the service does for 64 bit values."""
