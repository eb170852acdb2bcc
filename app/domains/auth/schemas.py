"""
File: app/domains/auth/schemas.py
Description: 认证领域 Pydantic 模型 (Schema)

本模块定义了认证相关的输入/输出数据结构：
1. Token: 登录/刷新成功后返回的双 Token 结构
2. LoginRequest: 用户名密码登录请求参数
3. RefreshRequest: 刷新 / 登出请求参数

注册请求体直接复用 users 领域的 UserCreate。

Author: jinmozhe
Created: 2026-03-03
"""

from pydantic import BaseModel, Field


class Token(BaseModel):
    """
    双 Token 响应结构 (Access + Refresh)。
    """

    access_token: str = Field(..., description="访问令牌 (JWT, 短效)")
    refresh_token: str = Field(..., description="刷新令牌 (随机串, 长效, 用于续期)")
    token_type: str = Field(default="bearer", description="令牌类型")
    expires_in: int = Field(..., description="Access Token 有效期 (秒)")


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50, examples=["alice"])
    password: str = Field(..., min_length=1, max_length=128, description="用户密码")


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, description="有效的刷新令牌")
