"""SQLAlchemy 文档存储

所有集合共用一张 documents 表（collection, doc_id, data），data 为 JSON 列。
一个批次在一个事务中执行，任何错误都会回滚整个批次。

使用示例:
    from ycms.config import DatabaseSettings
    from ycms.store import SqlDocumentStore

    store = SqlDocumentStore.from_settings(DatabaseSettings(url="sqlite:///./ycms.db"))
    store.create_all()
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, String, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from ycms.exceptions import Err
from ycms.log import get_logger

from .base import DocumentStore, Mutation, MutationOp, StoredDocument, matches

logger = get_logger()


class Base(DeclarativeBase):
    pass


class DocumentRow(Base):
    """文档表"""

    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(String(64), primary_key=True)
    doc_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    data: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict)


def create_store_engine(url: str, echo: bool = False, pool_pre_ping: bool = True) -> Engine:
    """创建数据库引擎

    SQLite 内存数据库使用 StaticPool（单连接），否则各连接看到的是不同的库。
    """
    if url.startswith("sqlite:///"):
        db_path = url[len("sqlite:///"):]
        if db_path in ("", ":memory:"):
            logger.info("SQLite内存数据库（StaticPool）")
            return create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False})
    return create_engine(url, echo=echo, pool_pre_ping=pool_pre_ping)


class SqlDocumentStore(DocumentStore):
    """基于 SQLAlchemy 的文档存储"""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_maker = sessionmaker(bind=engine, autoflush=False)

    @classmethod
    def from_settings(cls, settings) -> "SqlDocumentStore":
        """根据 DatabaseSettings 创建并建表"""
        engine = create_store_engine(settings.url, echo=settings.echo, pool_pre_ping=settings.pool_pre_ping)
        store = cls(engine)
        store.create_all()
        return store

    def create_all(self) -> None:
        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(self.engine)

    def session(self) -> Session:
        return self._session_maker()

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self.session() as session:
            row = session.get(DocumentRow, (collection, doc_id))
            return dict(row.data) if row is not None else None

    def list_documents(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[StoredDocument]:
        with self.session() as session:
            rows = session.scalars(
                select(DocumentRow).where(DocumentRow.collection == collection)
            ).all()
            return [
                StoredDocument(row.doc_id, dict(row.data))
                for row in rows
                if matches(row.data, filters)
            ]

    def commit(self, mutations: List[Mutation]) -> None:
        try:
            with self.session() as session, session.begin():
                for index, mutation in enumerate(mutations):
                    self._apply(session, mutation, index)
        except SQLAlchemyError as e:
            logger.error(f"批量写入事务失败: {e}")
            raise Err.batch(f"批量写入失败: {e}", count=len(mutations)) from e

    @staticmethod
    def _apply(session: Session, mutation: Mutation, index: int) -> None:
        row = session.get(DocumentRow, (mutation.collection, mutation.doc_id))

        if mutation.op == MutationOp.SET:
            if row is None:
                session.add(DocumentRow(
                    collection=mutation.collection,
                    doc_id=mutation.doc_id,
                    data=dict(mutation.fields),
                ))
            else:
                row.data = dict(mutation.fields)
        elif mutation.op == MutationOp.UPDATE:
            if row is None:
                raise Err.batch(
                    f"文档不存在: {mutation.collection}/{mutation.doc_id}",
                    failed_index=index,
                    collection=mutation.collection,
                    doc_id=mutation.doc_id,
                )
            # 赋新字典，JSON 列才会被标记为已修改
            row.data = {**row.data, **mutation.fields}
        elif row is not None:
            session.delete(row)

        session.flush()


__all__ = [
    "Base",
    "DocumentRow",
    "create_store_engine",
    "SqlDocumentStore",
]
