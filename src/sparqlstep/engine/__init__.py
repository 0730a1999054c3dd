"""Step engine: row projection, validation, schema inference, runtime.

Usage:
    from sparqlstep.engine import StepRuntime

    with StepRuntime(settings, step_name="repositories") as runtime:
        if runtime.init():
            runtime.produce_rows(put_row)
"""

from sparqlstep.engine.check import check_input_steps
from sparqlstep.engine.projector import QueryRowProjector
from sparqlstep.engine.runtime import RowEmitter, StepRuntime
from sparqlstep.engine.schema import infer_output_fields

__all__ = [
    "QueryRowProjector",
    "RowEmitter",
    "StepRuntime",
    "check_input_steps",
    "infer_output_fields",
]
