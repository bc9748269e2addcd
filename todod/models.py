from pydantic import StrictInt
from sqlmodel import Field, SQLModel


class TodoBase(SQLModel):
    """Base model with shared fields"""

    name: str = Field(default="")
    description: str = Field(default="")


class Todo(SQLModel, table=True):
    """Database model"""

    __tablename__ = "todos"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(default="")
    description: str = Field(default="")


class TodoCreate(TodoBase):
    """Schema for creating a todo"""

    pass


class TodoUpdate(TodoBase):
    """Schema for updating a todo - a missing, null or 0 ``id`` means unset"""

    id: StrictInt | None = None


class TodoResponse(SQLModel):
    """Schema for todo responses"""

    id: int
    name: str
    description: str

    model_config = {"from_attributes": True}
