"""
SkillSwap request schemas

Each Pydantic model describes the JSON body accepted by one operation.
Services validate raw payloads against these before touching the database.
"""

import re
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, HttpUrl, StrictInt, StrictStr, field_validator, model_validator


TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    location: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ExternalProfile(BaseModel):
    """Profile handed over by the external identity provider."""

    id: Optional[str] = None
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=50)
    picture: Optional[str] = None

    @field_validator('id', mode='before')
    @classmethod
    def stringify_id(cls, value):
        return str(value) if isinstance(value, int) and not isinstance(value, bool) else value


class ExternalLoginRequest(BaseModel):
    token: Optional[str] = None
    profile: ExternalProfile


class SkillPayload(BaseModel):
    title: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    category: str = Field(..., min_length=1)
    skill_type: Literal['offered', 'wanted']
    level: Optional[Literal['beginner', 'intermediate', 'advanced']] = None


class SwapRequestPayload(BaseModel):
    provider_id: StrictInt
    offered_skill_id: StrictInt
    wanted_skill_id: StrictInt
    message: Optional[str] = Field(default=None, max_length=500)


class StatusUpdate(BaseModel):
    status: StrictStr


class ReviewPayload(BaseModel):
    swap_request_id: StrictInt
    reviewee_id: StrictInt
    rating: StrictInt = Field(..., ge=1, le=5)
    feedback: Optional[str] = Field(default=None, max_length=500)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    location: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)
    photo: Optional[HttpUrl] = None


class AvailabilitySlot(BaseModel):
    day_of_week: StrictInt = Field(..., ge=0, le=6)
    start_time: str
    end_time: str

    @field_validator('start_time', 'end_time')
    @classmethod
    def check_time(cls, value):
        if not TIME_PATTERN.match(value):
            raise ValueError('time must use the HH:MM format')
        return value

    @model_validator(mode='after')
    def check_order(self):
        # zero-padded HH:MM strings order the same way as the times they name
        if self.start_time >= self.end_time:
            raise ValueError('start_time must be before end_time')
        return self


class AvailabilityUpdate(BaseModel):
    slots: List[AvailabilitySlot]
