"""minidream submit — answer schemas, record builder and submitters."""

from minidream.submit.client import DryRunSubmitter, Submitter, SynapseSubmitter
from minidream.submit.record import (
    MODULE_SCHEMAS,
    AnswerField,
    ModuleSchema,
    RecordBuilder,
    get_schema,
    register_schema,
)

__all__ = [
    "AnswerField",
    "DryRunSubmitter",
    "MODULE_SCHEMAS",
    "ModuleSchema",
    "RecordBuilder",
    "Submitter",
    "SynapseSubmitter",
    "get_schema",
    "register_schema",
]
