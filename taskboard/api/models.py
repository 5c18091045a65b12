from pydantic import BaseModel, ConfigDict, Field


class TaskBase(BaseModel):
    title: str | None = None
    description: str | None = None
    status: str | None = None


class TaskCreate(TaskBase):
    pass


class TaskUpdate(TaskBase):
    """Partial update; only the fields present in the request body are applied."""
    pass


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    description: str | None
    status: str
    user_id: int
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


class TaskListResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    page: int
    limit: int
    total: int
    tasks: list[TaskResponse]


class TaskCreatedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    success: bool = True
    message: str = "Task created successfully"
    task_id: int = Field(alias="taskId")
    title: str
    description: str | None
    status: str


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    code: int
    error: str
    message: str
