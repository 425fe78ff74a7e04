from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Literal, Optional

Priority = Literal["P1", "P2", "P3", "P4"]
Status = Literal["pending", "in_progress", "completed"]

PRIORITIES = ("P1", "P2", "P3", "P4")
DEFAULT_PRIORITY = "P3"


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON (dueDate, createdAt)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Task(CamelModel):
    id: int
    name: str
    description: str = ""
    assignee: str
    due_date: str  # ISO 8601 instant, or free text for transcript tasks
    priority: Priority = "P3"
    status: Status = "pending"
    completed: Optional[str] = None  # ISO timestamp set when status becomes completed
    created_at: str

class TaskCreate(CamelModel):
    name: str = Field(min_length=1)
    description: str = ""
    assignee: str = Field(min_length=1)
    due_date: str = Field(min_length=1)
    priority: Priority = "P3"
    status: Status = "pending"

class TaskUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    assignee: Optional[str] = Field(default=None, min_length=1)
    due_date: Optional[str] = Field(default=None, min_length=1)
    priority: Optional[Priority] = None
    status: Optional[Status] = None

class TaskStats(BaseModel):
    total: int
    completed: int
    pending: int


class ParsedTask(CamelModel):
    """Single-task preview produced from one natural-language sentence."""
    name: str
    assignee: str
    due_date: str
    priority: Priority
    description: str = ""
    status: Status = "pending"

class TranscriptTask(CamelModel):
    """One task extracted from a meeting transcript."""
    name: str
    assignee: str
    due_date: str
    priority: Priority
    status: Status = "pending"


class ParseRequest(BaseModel):
    input: Optional[str] = None

class TranscriptRequest(BaseModel):
    transcript: Optional[str] = None
