"""stackauto — drive pulumi stacks from Python.

    from stackauto import LocalWorkspace, Stack

    ws = LocalWorkspace(work_dir="infra")
    stack = Stack.upsert("dev", ws)
    result = stack.up()
"""

__version__ = "0.1.0"

from stackauto.core.engine.stack import Stack, fully_qualified_stack_name  # noqa: E402
from stackauto.core.workspace.local import LocalWorkspace  # noqa: E402

__all__ = [
    "LocalWorkspace",
    "Stack",
    "__version__",
    "fully_qualified_stack_name",
]
