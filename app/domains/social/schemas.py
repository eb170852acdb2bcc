"""
File: app/domains/social/schemas.py
Description: 社交关系领域 Pydantic 模型 (Schema)

Author: jinmozhe
Created: 2026-03-08
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.db.models.social import FriendRequestStatus
from app.domains.users.schemas import UserBrief


class FriendRequestRead(BaseModel):
    """收到的好友申请 (附带申请人信息)"""

    id: int
    sender_id: int
    receiver_id: int
    status: FriendRequestStatus
    created_at: datetime
    updated_at: datetime
    sender: UserBrief | None = None

    model_config = ConfigDict(from_attributes=True)


class RelationChange(BaseModel):
    """关注 / 好友申请等关系写操作的结果"""

    user_id: int = Field(..., description="发起人")
    target_id: int = Field(..., description="目标用户")
    changed: bool = Field(..., description="本次操作是否产生了变化")
