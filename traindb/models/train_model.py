from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from traindb.core.db import Base


class TrainModel(Base):
    __tablename__ = "train_models"
    batch_id = Column(Integer, primary_key=True)
    common_name = Column(String, nullable=True)
    manufacturer = Column(String, nullable=True)
    manufacture_location = Column(String, nullable=True)
    years_manufactured = Column(String, nullable=True)
    full_name = Column(String, nullable=True)

    cars = relationship("TrainCar", back_populates="model")
