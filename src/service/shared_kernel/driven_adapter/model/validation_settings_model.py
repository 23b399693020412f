from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, Integer
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class ValidationSettingsModel(Base):
    """Single-row table edited by the admin settings screen"""

    __tablename__ = 'validation_settings'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    qr_code_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    scanner_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    require_validator_role: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    scan_time_window_days: Mapped[float] = mapped_column(Float, default=1.0, nullable=False)
    allow_validation_anytime: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    anti_replay_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
