from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from traindb.core.db import Base


class TrainCar(Base):
    __tablename__ = "train_cars"
    vehicle_id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=True)
    status = Column(String, nullable=False, default="Unknown")  # 'In Service' | 'In Testing' | 'Retired' | 'Scrapped' | 'Sold' | 'Unknown'
    delivery_date = Column(String, nullable=True)
    enter_service_date = Column(String, nullable=True)
    batch_id = Column(Integer, ForeignKey("train_models.batch_id"), nullable=True)
    notes = Column(Text, nullable=True)
    last_modified = Column(DateTime(timezone=True), server_default=func.now())

    model = relationship("TrainModel", back_populates="cars")
