"""
Domain models — typed data for stack automation.

All models are re-exported here for convenient access:

    from stackauto.core.models import StackIdentity, UpdateSummary, UpOptions
"""

from stackauto.core.models.config import ConfigMap, ConfigValue
from stackauto.core.models.options import (
    DestroyOptions,
    OutputCallback,
    PreviewOptions,
    PulumiFn,
    RefreshOptions,
    UpOptions,
)
from stackauto.core.models.results import (
    CommandResult,
    DestroyResult,
    OutputMap,
    OutputValue,
    PreviewResult,
    RefreshResult,
    UpResult,
)
from stackauto.core.models.stack import (
    StackIdentity,
    StackInitMode,
    StackState,
    fully_qualified_stack_name,
)
from stackauto.core.models.summary import OpMap, OpType, UpdateKind, UpdateResult, UpdateSummary

__all__ = [
    # results.py
    "CommandResult",
    # config.py
    "ConfigMap",
    "ConfigValue",
    # options.py
    "DestroyOptions",
    "DestroyResult",
    # summary.py
    "OpMap",
    "OpType",
    "OutputCallback",
    "OutputMap",
    "OutputValue",
    "PreviewOptions",
    "PreviewResult",
    "PulumiFn",
    "RefreshOptions",
    "RefreshResult",
    # stack.py
    "StackIdentity",
    "StackInitMode",
    "StackState",
    "UpOptions",
    "UpResult",
    "UpdateKind",
    "UpdateResult",
    "UpdateSummary",
    "fully_qualified_stack_name",
]
