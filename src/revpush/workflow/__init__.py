from revpush.workflow.errors import UsageError, UserAbort
from revpush.workflow.push import PushOptions, PushWorkflow

__all__ = ["PushOptions", "PushWorkflow", "UsageError", "UserAbort"]
