from typing import Dict

from .common import CamelModel, SuccessResponse


class YesNoCounts(CamelModel):
    yes: int = 0
    no: int = 0


class AggregatesResponse(SuccessResponse):
    aggregates: Dict[str, YesNoCounts]
    total_participants: int
    # whole-number shares of each scenario's total, for the results screen
    percentages: Dict[str, YesNoCounts]
