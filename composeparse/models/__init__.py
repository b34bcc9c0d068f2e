"""Response models."""
from composeparse.models.response import ErrorInfo, ParseResponse

__all__ = ["ErrorInfo", "ParseResponse"]
