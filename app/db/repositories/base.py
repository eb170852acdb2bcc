"""
File: app/db/repositories/base.py
Description: 通用异步 Repository 基类

特性：
- 泛型: BaseRepository[ModelType, CreateSchemaType, UpdateSchemaType]
- 纯异步: sqlalchemy.ext.asyncio
- 只 flush 不 commit：事务边界由 Service 层控制，多步写操作在同一事务内原子提交
- insert_ignore: 方言相关的 INSERT ... ON CONFLICT DO NOTHING RETURNING，
  用于成员、点赞、关注等幂等写入，并告知调用方"是否真的插入了一行"

Author: jinmozhe
Created: 2026-03-02
"""

from collections.abc import Sequence
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import Insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

_DIALECT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    通用 CRUD 仓储基类。

    参数:
    - model: SQLAlchemy 模型类 (如 User)
    - session: 当前请求的 AsyncSession
    """

    # 通用 update 禁止修改的字段
    PROTECTED_FIELDS: ClassVar[set[str]] = {"id", "created_at", "updated_at"}

    def __init__(self, model: type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    # --------------------------------------------------------------------------
    # Read
    # --------------------------------------------------------------------------

    async def get(self, id: Any) -> ModelType | None:
        """按主键查询"""
        return await self.session.get(self.model, id)

    # --------------------------------------------------------------------------
    # Write (Create / Update)
    # --------------------------------------------------------------------------

    async def create(self, obj_in: CreateSchemaType | dict[str, Any]) -> ModelType:
        """
        创建记录并 flush 以拿到自增 ID。不 commit。
        """
        if isinstance(obj_in, dict):
            data = obj_in
        else:
            data = obj_in.model_dump(exclude_unset=True)

        db_obj = self.model(**data)
        self.session.add(db_obj)
        await self.session.flush()
        await self.session.refresh(db_obj)
        return db_obj

    async def update(
        self, db_obj: ModelType, obj_in: UpdateSchemaType | dict[str, Any]
    ) -> ModelType:
        """
        部分更新 (PATCH 语义)，自动过滤 PROTECTED_FIELDS。
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        safe_data = {
            k: v for k, v in update_data.items() if k not in self.PROTECTED_FIELDS
        }
        if hasattr(db_obj, "update"):
            db_obj.update(**safe_data)  # type: ignore[union-attr]
        else:
            for field, value in safe_data.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)

        self.session.add(db_obj)
        await self.session.flush()
        await self.session.refresh(db_obj)
        return db_obj

    # --------------------------------------------------------------------------
    # 幂等写入 (ON CONFLICT DO NOTHING)
    # --------------------------------------------------------------------------

    def dialect_insert(self, model: type[Base]) -> Insert:
        """
        返回当前方言的 insert 构造器 (支持 on_conflict_do_nothing)。
        """
        dialect = self.session.get_bind().dialect.name
        try:
            insert_factory = _DIALECT_INSERTS[dialect]
        except KeyError:
            raise NotImplementedError(
                f"ON CONFLICT insert is not supported for dialect: {dialect}"
            ) from None
        return insert_factory(model)

    async def insert_ignore(
        self,
        model: type[Base],
        values: dict[str, Any],
        conflict_columns: Sequence[str],
    ) -> bool:
        """
        INSERT ... ON CONFLICT (conflict_columns) DO NOTHING RETURNING 1

        Returns:
            bool: 本次确实插入了新行返回 True；冲突 (已存在) 返回 False

        PostgreSQL 下并发插入同一键时，后到的语句会等待先到事务结束，
        再判定冲突，因此同一键在所有并发调用中至多有一次返回 True。
        """
        first_pk = model.__table__.primary_key.columns.values()[0]  # type: ignore[attr-defined]
        stmt = (
            self.dialect_insert(model)
            .values(**values)
            .on_conflict_do_nothing(index_elements=list(conflict_columns))  # type: ignore[attr-defined]
            .returning(first_pk)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None
