from datetime import datetime
from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from partyhub.db.base import Base


# 名前付きの保存スロット（ブラウザの localStorage 相当）
# 1スロット = 1キー + JSON文字列
class StorageSlot(Base):
    __tablename__ = "M_STORAGE_SLOT"

    key: Mapped[str] = mapped_column(String(100), primary_key=True, doc="スロット名")
    value: Mapped[str] = mapped_column(Text, nullable=False, doc="保存データ（JSON）")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
