"""Use cases. Each receives its repositories through the constructor and returns Success or Failure."""

from race_logger.operations.result import Failure, OperationResult, Success

__all__ = ["Failure", "OperationResult", "Success"]
