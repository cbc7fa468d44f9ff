from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


# --- Topic ---

class TopicBase(BaseModel):
    name: str = Field(max_length=100)


class TopicCreate(TopicBase):
    pass


class TopicUpdate(TopicBase):
    pass


class TopicResponse(TopicBase):
    id: int
    model_config = ConfigDict(from_attributes=True)


# --- User ---

class UserBase(BaseModel):
    username: str = Field(max_length=100)


class UserCreate(UserBase):
    pass


class UserResponse(UserBase):
    id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# --- Post ---

class PostBase(BaseModel):
    title: str = Field(max_length=300)
    content: str


class PostCreate(PostBase):
    author_id: int
    topic_ids: list[int] = []


class PostUpdate(PostBase):
    """Both fields are always supplied; there is no partial update."""


class PostTopicsUpdate(BaseModel):
    topic_ids: list[int]


class PostResponse(PostBase):
    id: int
    author_id: int | None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


# --- Comment ---

class CommentBase(BaseModel):
    content: str


class CommentCreate(CommentBase):
    post_id: int
    author_id: int


class CommentUpdate(CommentBase):
    pass


class CommentResponse(CommentBase):
    id: int
    post_id: int
    author_id: int | None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


# --- Auth ---

class LoginRequest(BaseModel):
    username: str = Field(max_length=100)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds until the token expires
