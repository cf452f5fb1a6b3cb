class TrainDBError(Exception):
    """Base class for all train database errors."""

class TrainCarsQueryError(TrainDBError):
    """Raised when a listing query against the backing store fails."""

class OriginNotAllowedError(TrainDBError):
    """Raised when an API request carries an Origin or Referer from another site."""
