"""Design-time verification of the step's position in a pipeline.

This step generates rows from the store, so it must be a source: nothing
may feed rows into it. The check informs; it never blocks a run.
"""

from collections.abc import Sequence

from sparqlstep.contracts import CheckResult

RECEIVING_ROWS_OK = "SparqlStep.CheckResult.ReceivingRows.OK"
RECEIVING_ROWS_ERROR = "SparqlStep.CheckResult.ReceivingRows.ERROR"


def check_input_steps(
    input_steps: Sequence[str],
    step_name: str | None = None,
) -> list[CheckResult]:
    """Return exactly one remark about the step's upstream producers.

    Args:
        input_steps: Names of steps sending rows to this step
        step_name: Name of this step, attached to the remark

    Returns:
        [OK] when there are no upstream producers, otherwise [ERROR]
    """
    if len(input_steps) > 0:
        return [CheckResult.error(RECEIVING_ROWS_ERROR, step_name=step_name)]
    return [CheckResult.ok(RECEIVING_ROWS_OK, step_name=step_name)]
