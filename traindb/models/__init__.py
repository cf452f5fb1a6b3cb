from .train_model import TrainModel
from .train_car import TrainCar
from .car_marriage import CarMarriage
